"""User store port: persistence collaborator for the authorization engine."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Awaitable, Callable, Iterable
from typing import Protocol

from warden.domain.auth.model.role import Role
from warden.domain.auth.model.user import User
from warden.domain.auth.model.value import UserId
from warden.domain.shared.port import Port

HolderCounter = Callable[[Role], Awaitable[int]]
"""Counts holders of a role inside the caller's transaction."""

RoleChangeGuard = Callable[[User, HolderCounter], Awaitable[None]]
"""Validation hook run by ``apply_role_change`` before the write.

Receives the freshly loaded target and a counter bound to the same
transaction. Raises to abort the change.
"""


class UserStore(Port, Protocol):
    """Repository for User aggregate persistence."""

    @abstractmethod
    async def get(self, user_id: UserId) -> User | None:
        """Get a user by ID."""
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email address."""
        ...

    @abstractmethod
    async def get_many(self, user_ids: Iterable[UserId]) -> list[User]:
        """Get all existing users among ``user_ids``. Missing ids are omitted."""
        ...

    @abstractmethod
    async def list(self, role: Role | None = None) -> list[User]:
        """List users, optionally restricted to one role."""
        ...

    @abstractmethod
    async def count_by_role(self, role: Role) -> int:
        """Count current holders of ``role``."""
        ...

    @abstractmethod
    async def save(self, user: User) -> None:
        """Save a user (create or update)."""
        ...

    @abstractmethod
    async def apply_role_change(
        self,
        user_id: UserId,
        role: Role,
        guard: RoleChangeGuard,
    ) -> User:
        """Run ``guard`` and write the new role in one serializable transaction.

        The holder count read by ``guard`` and the write must not interleave
        with a concurrent change to the same role class. Writes ``role``, the
        cached role level and ``updated_at``; returns the updated user.

        Raises:
            TargetNotFound: If the user does not exist.
            Whatever ``guard`` raises; the transaction is rolled back.
            PersistenceFailure: If the write itself fails.
        """
        ...

    @abstractmethod
    async def set_permissions(self, user_id: UserId, permissions: frozenset[str]) -> User:
        """Replace a user's permission overrides and return the updated user.

        Raises:
            TargetNotFound: If the user does not exist.
            PersistenceFailure: If the write fails.
        """
        ...
