"""Startup validation for handler authorization declarations."""

import logging
from collections.abc import Iterable

from warden.domain.shared.authorization.gate import Gate
from warden.domain.shared.command import CommandHandler
from warden.domain.shared.error import ConfigurationError
from warden.domain.shared.query import QueryHandler

logger = logging.getLogger(__name__)


def _check_handler_class(handler_cls: type) -> None:
    """Raise ConfigurationError if the handler lacks a Gate in __auth__."""
    if not isinstance(getattr(handler_cls, "__auth__", None), Gate):
        raise ConfigurationError(f"Handler {handler_cls.__name__} has no __auth__ declaration")


def validate_all_handlers(handlers: Iterable[type] | None = None) -> None:
    """Check every handler class for an __auth__ gate.

    Defaults to all registered CommandHandler and QueryHandler subclasses.
    Raises ConfigurationError listing all handlers missing __auth__ declarations.
    """
    if handlers is None:
        handlers = [*CommandHandler.__subclasses__(), *QueryHandler.__subclasses__()]

    violations: list[str] = []
    count = 0
    for handler_cls in handlers:
        count += 1
        try:
            _check_handler_class(handler_cls)
        except ConfigurationError as e:
            violations.append(str(e))

    if violations:
        raise ConfigurationError(
            f"Authorization validation failed for {len(violations)} handler(s):\n"
            + "\n".join(f"  - {v}" for v in violations)
        )

    logger.info("Authorization startup validation passed for %d handlers", count)
