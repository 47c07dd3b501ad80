"""AuditLogEntry: immutable record of one accepted privilege change."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import Field

from warden.domain.auth.model.value import AuditEntryId, UserId
from warden.domain.shared.model.value import ValueObject


class AuditAction(StrEnum):
    ROLE_CHANGE = "ROLE_CHANGE"
    PERMISSION_CHANGE = "PERMISSION_CHANGE"


class AuditLogEntry(ValueObject):
    """Created exactly once per accepted mutation; never updated or deleted."""

    id: AuditEntryId = Field(default_factory=AuditEntryId.generate)
    actor_id: UserId
    actor_email: str
    target_id: UserId
    target_email: str
    action: AuditAction
    old_value: dict[str, Any] | None = None
    new_value: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
