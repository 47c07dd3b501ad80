"""Glue between synchronous CLI commands and the async unit of work."""

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import NoReturn, TypeVar

from dishka import AsyncContainer

from warden.application.di import create_container
from warden.cli.console import get_console
from warden.config import Config, configure_logging
from warden.domain.auth.model.role import validate_registry
from warden.domain.auth.model.value import UserId, parse_user_id
from warden.domain.auth.port.user_store import UserStore
from warden.domain.auth.util.di import ActorRef
from warden.domain.shared.authorization.startup import validate_all_handlers
from warden.domain.shared.error import TargetNotFound, WardenError
from warden.infrastructure.persistence.migrate import run_migrations
from warden.util.di.scope import Scope

logger = logging.getLogger(__name__)

T = TypeVar("T")

UnitOfWork = Callable[[AsyncContainer], Awaitable[T]]


def _startup(config: Config) -> None:
    configure_logging(config.logging)
    validate_registry()
    validate_all_handlers()
    if config.database.auto_migrate and config.database.url.startswith("sqlite"):
        run_migrations(config.database.url)


async def _run_uow(config: Config, actor: str | None, work: UnitOfWork[T]) -> T:
    container = create_container(config)
    context = {ActorRef: ActorRef(email=actor)} if actor else {}
    try:
        async with container(context=context, scope=Scope.UOW) as uow:
            return await work(uow)
    finally:
        await container.close()


def fail(error: WardenError) -> NoReturn:
    get_console().error(error.message, hint=error.code)
    sys.exit(1)


def run(work: UnitOfWork[T], *, actor: str | None = None) -> T:
    """Run ``work`` inside one unit of work; domain errors end the process."""
    config = Config()  # type: ignore[call-arg]
    try:
        _startup(config)
        return asyncio.run(_run_uow(config, actor, work))
    except WardenError as e:
        logger.debug("Command failed: %s (%s)", e.message, e.code)
        fail(e)


async def resolve_user_id(uow: AsyncContainer, ref: str) -> UserId:
    """Accept either a user id or an email address."""
    if "@" not in ref:
        return parse_user_id(ref)
    store = await uow.get(UserStore)
    user = await store.get_by_email(ref)
    if user is None:
        raise TargetNotFound(ref)
    return user.id
