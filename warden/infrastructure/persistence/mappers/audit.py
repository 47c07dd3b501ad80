from typing import Any

from warden.domain.auth.model.audit import AuditAction, AuditLogEntry
from warden.domain.auth.model.value import AuditEntryId, UserId


def row_to_audit_entry(row: dict[str, Any]) -> AuditLogEntry:
    return AuditLogEntry(
        id=AuditEntryId(row["id"]),
        actor_id=UserId(row["actor_id"]),
        actor_email=row["actor_email"],
        target_id=UserId(row["target_id"]),
        target_email=row["target_email"],
        action=AuditAction(row["action"]),
        old_value=row.get("old_value"),
        new_value=row.get("new_value"),
        metadata=row.get("metadata"),
        timestamp=row["timestamp"],
    )


def audit_entry_to_dict(entry: AuditLogEntry) -> dict[str, Any]:
    return {
        "id": str(entry.id),
        "actor_id": str(entry.actor_id),
        "actor_email": entry.actor_email,
        "target_id": str(entry.target_id),
        "target_email": entry.target_email,
        "action": entry.action.value,
        "old_value": entry.old_value,
        "new_value": entry.new_value,
        "metadata": entry.metadata,
        "timestamp": entry.timestamp,
    }
