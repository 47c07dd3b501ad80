"""Console output for the CLI.

Provides a Console class that wraps rich for consistent output. All CLI
output should go through this module.
"""

from typing import Any

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from warden.domain.auth.model.bulk import BulkResult
from warden.domain.auth.query.list_audit_log import AuditLogEntryDTO
from warden.domain.auth.query.user_dto import UserDTO


class Console:
    """CLI output manager wrapping rich."""

    def __init__(
        self,
        *,
        force_terminal: bool | None = None,
        quiet: bool = False,
    ) -> None:
        self._console = RichConsole(force_terminal=force_terminal, stderr=False)
        self._err_console = RichConsole(force_terminal=force_terminal, stderr=True)
        self._quiet = quiet

    # -------------------------------------------------------------------------
    # Status messages
    # -------------------------------------------------------------------------

    def success(self, message: str) -> None:
        self._console.print(f"[green]✓[/green] {message}")

    def error(self, message: str, *, hint: str | None = None) -> None:
        """Print an error message to stderr."""
        self._err_console.print(f"[red]✗[/red] {message}")
        if hint:
            self._err_console.print(f"  [dim]{hint}[/dim]")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]⚠[/yellow] {message}")

    def info(self, message: str) -> None:
        """Print an info message (suppressed in quiet mode)."""
        if not self._quiet:
            self._console.print(f"[dim]{message}[/dim]")

    # -------------------------------------------------------------------------
    # Structured output
    # -------------------------------------------------------------------------

    def print(self, *args: Any, **kwargs: Any) -> None:
        self._console.print(*args, **kwargs)

    def table(
        self,
        rows: list[dict[str, Any]],
        columns: list[tuple[str, str]],  # (key, header)
        *,
        title: str | None = None,
    ) -> None:
        table = Table(title=title, show_header=True, header_style="bold")
        for _, header in columns:
            table.add_column(header)
        for row in rows:
            table.add_row(*[str(row.get(key, "")) for key, _ in columns])
        self._console.print(table)

    def panel(self, content: str, *, title: str | None = None, border_style: str = "dim") -> None:
        self._console.print(Panel(content, title=title, border_style=border_style))

    # -------------------------------------------------------------------------
    # Domain views
    # -------------------------------------------------------------------------

    def users(self, users: list[UserDTO], *, title: str | None = None) -> None:
        if not users:
            self.warning("No users found")
            return
        self.table(
            [
                {
                    "id": u.id,
                    "email": u.email,
                    "name": u.name or "",
                    "role": u.role,
                    "level": u.role_level,
                    "overrides": len(u.permissions),
                }
                for u in users
            ],
            [
                ("id", "ID"),
                ("email", "Email"),
                ("name", "Name"),
                ("role", "Role"),
                ("level", "Level"),
                ("overrides", "Overrides"),
            ],
            title=title,
        )

    def user_detail(self, user: UserDTO, effective: list[str]) -> None:
        lines = [
            f"[cyan]Email:[/cyan] {user.email}",
            f"[cyan]Name:[/cyan] {user.name or '-'}",
            f"[cyan]Role:[/cyan] {user.role} (level {user.role_level})",
            f"[cyan]Overrides:[/cyan] {', '.join(user.permissions) or '-'}",
            "",
            "[cyan]Effective permissions:[/cyan]",
            *[f"  {p}" for p in effective],
        ]
        self._console.print(
            Panel("\n".join(lines), title=f"[bold]{user.id}[/bold]", border_style="blue")
        )

    def bulk_result(self, result: BulkResult, message: str) -> None:
        if result.failed_count or result.skipped_count:
            self.warning(message)
        else:
            self.success(message)
        if result.failed:
            self.table(
                [f.model_dump() for f in result.failed],
                [("user_id", "User"), ("code", "Code"), ("reason", "Reason")],
                title="Failed",
            )
        if result.skipped:
            self.table(
                [s.model_dump() for s in result.skipped],
                [("user_id", "User"), ("email", "Email"), ("reason", "Reason")],
                title="Skipped",
            )

    def audit_entries(self, entries: list[AuditLogEntryDTO]) -> None:
        if not entries:
            self.warning("No audit entries")
            return
        self.table(
            [
                {
                    "when": e.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
                    "action": e.action,
                    "actor": e.actor_email,
                    "target": e.target_email,
                    "old": e.old_value or "",
                    "new": e.new_value or "",
                }
                for e in entries
            ],
            [
                ("when", "When"),
                ("action", "Action"),
                ("actor", "Actor"),
                ("target", "Target"),
                ("old", "Old"),
                ("new", "New"),
            ],
        )


# Module-level default instance for convenience
_default: Console | None = None


def get_console() -> Console:
    """Get the default console instance."""
    global _default
    if _default is None:
        _default = Console()
    return _default
