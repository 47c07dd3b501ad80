"""Audit store port: append-only log of privilege changes."""

from abc import abstractmethod
from typing import Protocol

from warden.domain.auth.model.audit import AuditLogEntry
from warden.domain.auth.model.value import UserId
from warden.domain.shared.port import Port


class AuditStore(Port, Protocol):
    @abstractmethod
    async def append(self, entry: AuditLogEntry) -> None:
        """Append one entry. Entries are never updated or deleted."""
        ...

    @abstractmethod
    async def list_for_user(self, user_id: UserId, limit: int = 50) -> list[AuditLogEntry]:
        """Entries where the user is actor or target, newest first."""
        ...

    @abstractmethod
    async def list_recent(self, limit: int = 100) -> list[AuditLogEntry]:
        """Most recent entries across all users, newest first."""
        ...
