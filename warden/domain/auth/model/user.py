"""User aggregate for the auth domain."""

from collections.abc import Iterable
from datetime import UTC, datetime

from warden.domain.auth.model.role import Role, level_of
from warden.domain.auth.model.value import UserId
from warden.domain.shared.model.value import Aggregate


class User(Aggregate):
    """An admin user as seen by the authorization engine.

    Users are created by the external identity-sync process and are never
    deleted here. ``permissions`` holds individual overrides granted in
    addition to the role's defaults, not a replacement for them.

    Invariants:
    - `id` is immutable after creation
    - `role_level` is always derived from `role`, never stored on the model
    - `updated_at` is set on any modification
    """

    id: UserId
    email: str
    name: str | None = None
    role: Role = Role.VIEWER
    permissions: frozenset[str] = frozenset()
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        email: str,
        name: str | None = None,
        role: Role = Role.VIEWER,
        user_id: UserId | None = None,
    ) -> "User":
        """Create a new user with no permission overrides."""
        return cls(
            id=user_id or UserId.generate(),
            email=email,
            name=name,
            role=role,
            created_at=datetime.now(UTC),
        )

    @property
    def role_level(self) -> int:
        return level_of(self.role)

    def change_role(self, role: Role) -> None:
        self.role = role
        self.updated_at = datetime.now(UTC)

    def replace_permissions(self, permissions: Iterable[str]) -> None:
        self.permissions = frozenset(permissions)
        self.updated_at = datetime.now(UTC)
