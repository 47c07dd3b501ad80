"""ListAuditLog query and handler."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from warden.domain.auth.model.audit import AuditLogEntry
from warden.domain.auth.model.permission import Permission
from warden.domain.auth.model.user import User
from warden.domain.auth.model.value import parse_user_id
from warden.domain.auth.service.audit import AuditRecorder
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.query import Query, QueryHandler, Result


class ListAuditLog(Query):
    """Recent privilege changes, or one user's history when ``user_id`` is set."""

    user_id: str | None = None
    limit: int = Field(default=50, ge=1, le=1000)


class AuditLogEntryDTO(BaseModel):
    id: str
    timestamp: datetime
    action: str
    actor_id: str
    actor_email: str
    target_id: str
    target_email: str
    old_value: dict[str, Any] | None
    new_value: dict[str, Any] | None
    metadata: dict[str, Any] | None

    @classmethod
    def from_entry(cls, entry: AuditLogEntry) -> "AuditLogEntryDTO":
        return cls(
            id=str(entry.id),
            timestamp=entry.timestamp,
            action=entry.action.value,
            actor_id=str(entry.actor_id),
            actor_email=entry.actor_email,
            target_id=str(entry.target_id),
            target_email=entry.target_email,
            old_value=entry.old_value,
            new_value=entry.new_value,
            metadata=entry.metadata,
        )


class AuditLog(Result):
    entries: list[AuditLogEntryDTO]


class ListAuditLogHandler(QueryHandler[ListAuditLog, AuditLog]):
    __auth__ = requires(Permission.USERS_MANAGE_ROLES)
    actor: User
    audit: AuditRecorder

    async def run(self, query: ListAuditLog) -> AuditLog:
        if query.user_id is not None:
            entries = await self.audit.history_for(parse_user_id(query.user_id), limit=query.limit)
        else:
            entries = await self.audit.recent(limit=query.limit)
        return AuditLog(entries=[AuditLogEntryDTO.from_entry(e) for e in entries])
