"""SQL implementation of the AuditStore port."""

from sqlalchemy import insert, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.auth.model.audit import AuditLogEntry
from warden.domain.auth.model.value import UserId
from warden.domain.auth.port.audit_store import AuditStore
from warden.domain.shared.error import AuditWriteFailure
from warden.infrastructure.persistence.mappers.audit import (
    audit_entry_to_dict,
    row_to_audit_entry,
)
from warden.infrastructure.persistence.tables import rbac_audit_log_table


class SqlAuditStore(AuditStore):
    """Append-only store over ``rbac_audit_log``.

    Each append gets its own SAVEPOINT: a failed insert is rolled back alone
    and never takes the audited mutation with it.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def append(self, entry: AuditLogEntry) -> None:
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    insert(rbac_audit_log_table).values(**audit_entry_to_dict(entry))
                )
        except SQLAlchemyError as e:
            raise AuditWriteFailure(f"Failed to append audit entry {entry.id}: {e}") from e

    async def list_for_user(self, user_id: UserId, limit: int = 50) -> list[AuditLogEntry]:
        t = rbac_audit_log_table
        stmt = (
            select(t)
            .where(or_(t.c.actor_id == str(user_id), t.c.target_id == str(user_id)))
            .order_by(t.c.timestamp.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [row_to_audit_entry(dict(row)) for row in result.mappings().all()]

    async def list_recent(self, limit: int = 100) -> list[AuditLogEntry]:
        t = rbac_audit_log_table
        stmt = select(t).order_by(t.c.timestamp.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return [row_to_audit_entry(dict(row)) for row in result.mappings().all()]
