from dishka import AsyncContainer, make_async_container

from warden.config import Config
from warden.domain.auth.util.di import AuthProvider
from warden.infrastructure.persistence import PersistenceProvider
from warden.util.di.scope import Scope


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    return make_async_container(
        PersistenceProvider(),
        AuthProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
