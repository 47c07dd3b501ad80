"""Audit trail commands."""

import cyclopts
from dishka import AsyncContainer

from warden.cli.commands.users import Actor
from warden.cli.console import get_console
from warden.cli.runtime import resolve_user_id, run
from warden.config import Config
from warden.domain.auth.query.list_audit_log import AuditLog, ListAuditLog, ListAuditLogHandler

app = cyclopts.App(name="audit", help="Inspect the audit trail of privilege changes")


@app.command
def log(*, actor: Actor, user: str | None = None, limit: int | None = None) -> None:
    """Show recent role and permission changes, newest first.

    Args:
        actor: Email of the acting user (needs users.manage_roles).
        user: Only changes where this user (id or email) is actor or target.
        limit: Maximum entries to show.
    """

    async def work(uow: AsyncContainer) -> AuditLog:
        config = await uow.get(Config)
        user_id = str(await resolve_user_id(uow, user)) if user else None
        handler = await uow.get(ListAuditLogHandler)
        query = ListAuditLog(user_id=user_id, limit=limit or config.authz.audit_history_limit)
        return await handler.run(query)

    get_console().audit_entries(run(work, actor=actor).entries)
