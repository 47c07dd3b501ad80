"""Handler-level authorization gates: public(), at_least(Role) and requires(permission)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from warden.domain.auth.model.role import Role

logger = logging.getLogger("warden.authz")


class Gate:
    """Base for handler-level authorization gates.

    Every CommandHandler/QueryHandler must declare ``__auth__: ClassVar[Gate]``.
    A gate is a coarse check on the actor alone; target-specific rules live
    in the domain services the handler calls.
    """


@dataclass(frozen=True)
class Public(Gate):
    """No actor required."""


@dataclass(frozen=True)
class AtLeast(Gate):
    """Gate that requires the actor to have at least the given role."""

    role: "Role"


@dataclass(frozen=True)
class Requires(Gate):
    """Gate that requires the actor to hold the given permission."""

    permission: str


_PUBLIC = Public()


def public() -> Public:
    """Mark a handler as publicly accessible (no actor required)."""
    return _PUBLIC


def at_least(role: "Role") -> AtLeast:
    """Mark a handler as requiring at least the given role."""
    return AtLeast(role=role)


def requires(permission: str) -> Requires:
    """Mark a handler as requiring a permission (wildcards honoured)."""
    return Requires(permission=permission)


def enforce(handler: Any, gate: Gate | None) -> None:
    """Evaluate ``gate`` for ``handler.actor``. Raises on denial."""
    from warden.domain.auth.model.user import User
    from warden.domain.auth.service.permission import has_permission
    from warden.domain.shared.error import (
        AuthorizationError,
        ConfigurationError,
        PermissionDenied,
    )

    name = type(handler).__name__

    if not isinstance(gate, Gate):
        raise ConfigurationError(f"Handler {name} has no __auth__ declaration")

    if isinstance(gate, Public):
        return

    actor = getattr(handler, "actor", None)
    if not isinstance(actor, User):
        raise AuthorizationError("Authentication required", code="missing_actor")

    if isinstance(gate, AtLeast):
        allowed = actor.role >= gate.role
        required = gate.role.name
    elif isinstance(gate, Requires):
        allowed = has_permission(actor, gate.permission)
        required = gate.permission
    else:  # pragma: no cover
        raise ConfigurationError(
            f"Handler {name} has unhandled __auth__ type: {type(gate).__name__}"
        )

    if not allowed:
        logger.warning(
            "Access denied: handler=%s required=%s actor=%s role=%s",
            name,
            required,
            actor.id,
            actor.role.name,
        )
        if isinstance(gate, Requires):
            raise PermissionDenied(gate.permission)
        raise AuthorizationError(
            f"Access denied: insufficient role for {name}",
            code="access_denied",
        )

    logger.debug(
        "Access granted: handler=%s required=%s actor=%s role=%s",
        name,
        required,
        actor.id,
        actor.role.name,
    )
