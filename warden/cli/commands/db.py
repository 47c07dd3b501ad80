"""Database maintenance commands."""

import sys

import cyclopts

from warden.cli.console import get_console
from warden.config import Config, configure_logging
from warden.infrastructure.persistence.migrate import (
    current_revision,
    head_revision,
    run_migrations,
)

app = cyclopts.App(name="db", help="Database maintenance")


def _load_config() -> Config:
    config = Config()  # type: ignore[call-arg]
    configure_logging(config.logging)
    return config


@app.command
def migrate(revision: str = "head") -> None:
    """Apply Alembic migrations.

    Args:
        revision: Target revision.
    """
    config = _load_config()
    run_migrations(config.database.url, revision)
    get_console().success(f"Database at {revision}")


@app.command
def status() -> None:
    """Show the database revision against the newest migration. Exits 1 when behind."""
    config = _load_config()
    current = current_revision(config.database.url)
    head = head_revision(config.database.url)
    console = get_console()
    if current == head:
        console.success(f"Up to date ({head})")
        return
    console.warning(f"Database at {current or 'nothing'}, newest is {head}")
    console.info("Run `warden db migrate` to upgrade")
    sys.exit(1)
