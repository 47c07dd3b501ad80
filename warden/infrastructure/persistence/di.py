from typing import AsyncIterable

from dishka import Provider, from_context, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from warden.config import Config
from warden.domain.auth.port.audit_store import AuditStore
from warden.domain.auth.port.user_store import UserStore
from warden.infrastructure.persistence.database import create_db_engine, create_session_factory
from warden.infrastructure.persistence.repository.audit import SqlAuditStore
from warden.infrastructure.persistence.repository.user import SqlUserStore
from warden.util.di.scope import Scope


class PersistenceProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)

    # APP-scoped factories
    @provide(scope=Scope.APP)
    async def get_engine(self, config: Config) -> AsyncIterable[AsyncEngine]:
        engine = create_db_engine(config.database)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    # UOW-scoped session (one per unit of work)
    @provide(scope=Scope.UOW)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterable[AsyncSession]:
        async with session_factory() as session:
            yield session
            await session.commit()

    # UOW-scoped stores
    user_store = provide(SqlUserStore, scope=Scope.UOW, provides=UserStore)
    audit_store = provide(SqlAuditStore, scope=Scope.UOW, provides=AuditStore)
