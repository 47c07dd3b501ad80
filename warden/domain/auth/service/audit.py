"""Audit recorder: best-effort trail of privilege changes."""

import logging

from warden.domain.auth.model.audit import AuditAction, AuditLogEntry
from warden.domain.auth.model.user import User
from warden.domain.auth.model.value import UserId
from warden.domain.auth.port.audit_store import AuditStore
from warden.domain.shared.error import AuditWriteFailure
from warden.domain.shared.service import Service

audit_logger = logging.getLogger("warden.audit")


class AuditRecorder(Service):
    """Appends audit entries without ever failing the mutation they describe.

    A failed append is logged at ERROR on ``warden.audit`` and handed back to
    the caller as a value; the already-committed change stands.
    """

    _audit_store: AuditStore

    async def record(self, entry: AuditLogEntry) -> AuditWriteFailure | None:
        try:
            await self._audit_store.append(entry)
        except Exception as e:
            failure = AuditWriteFailure(f"Failed to write audit entry {entry.id}: {e}")
            audit_logger.error(
                "Audit write failed: action=%s actor=%s target=%s error=%s",
                entry.action,
                entry.actor_id,
                entry.target_id,
                e,
                exc_info=True,
            )
            return failure

        audit_logger.info(
            "Audit: %s actor=%s target=%s old=%s new=%s",
            entry.action,
            entry.actor_email,
            entry.target_email,
            entry.old_value,
            entry.new_value,
        )
        return None

    async def record_change(
        self,
        actor: User,
        target: User,
        action: AuditAction,
        old_value: dict,
        new_value: dict,
        metadata: dict | None = None,
    ) -> AuditWriteFailure | None:
        """Build an entry from actor/target snapshots and record it."""
        return await self.record(
            AuditLogEntry(
                actor_id=actor.id,
                actor_email=actor.email,
                target_id=target.id,
                target_email=target.email,
                action=action,
                old_value=old_value,
                new_value=new_value,
                metadata=metadata,
            )
        )

    async def history_for(self, user_id: UserId, limit: int = 50) -> list[AuditLogEntry]:
        """Entries where ``user_id`` is actor or target, newest first."""
        return await self._audit_store.list_for_user(user_id, limit=limit)

    async def recent(self, limit: int = 100) -> list[AuditLogEntry]:
        return await self._audit_store.list_recent(limit=limit)
