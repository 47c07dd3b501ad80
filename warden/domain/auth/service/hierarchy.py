"""Management hierarchy: who may act on whom."""

from collections.abc import Iterable

from warden.domain.auth.model.role import level_of
from warden.domain.auth.model.user import User


def can_manage(actor: User, target: User) -> bool:
    """Strictly higher level required. Equal level, self included, is never enough."""
    return level_of(actor.role) > level_of(target.role)


def filter_manageable(actor: User, users: Iterable[User]) -> list[User]:
    return [u for u in users if can_manage(actor, u)]
