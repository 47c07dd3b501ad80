from typing import Any

from warden.domain.auth.model.role import parse_role
from warden.domain.auth.model.user import User
from warden.domain.auth.model.value import UserId


def row_to_user(row: dict[str, Any]) -> User:
    """Convert database row to User aggregate.

    ``role_level`` is ignored: the level is always derived from ``role``.
    """
    return User(
        id=UserId(row["id"]),
        email=row["email"],
        name=row.get("name"),
        role=parse_role(row["role"]),
        permissions=frozenset(row.get("permissions") or []),
        created_at=row["created_at"],
        updated_at=row.get("updated_at"),
    )


def user_to_dict(user: User) -> dict[str, Any]:
    """Convert User aggregate to database dict."""
    return {
        "id": str(user.id),
        "email": user.email,
        "name": user.name,
        "role": user.role.name,
        "role_level": user.role_level,
        "permissions": sorted(user.permissions),
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }
