"""Alembic helpers.

Alembic runs on sync drivers, so these are called before (or instead of)
any async work.
"""

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine

logger = logging.getLogger(__name__)

# Repository root holding alembic.ini and migrations/
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent

_SYNC_DRIVERS = ("+aiosqlite", "+asyncpg")


def to_sync_url(database_url: str) -> str:
    """Strip the async driver and expand ``~`` in SQLite paths.

    ``sqlite+aiosqlite:///~/w.db`` becomes ``sqlite:////home/me/w.db`` and
    ``postgresql+asyncpg://...`` becomes ``postgresql://...``.
    """
    url = database_url
    for driver in _SYNC_DRIVERS:
        url = url.replace(driver, "")
    prefix, sep, path = url.partition("///")
    if url.startswith("sqlite") and path.startswith("~"):
        url = f"{prefix}{sep}{Path(path).expanduser()}"
    return url


def get_alembic_config(database_url: str) -> AlembicConfig:
    config = AlembicConfig(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    config.set_main_option("sqlalchemy.url", to_sync_url(database_url))
    return config


def head_revision(database_url: str) -> str | None:
    """Newest revision shipped in migrations/."""
    return ScriptDirectory.from_config(get_alembic_config(database_url)).get_current_head()


def current_revision(database_url: str) -> str | None:
    """Revision the database is at, or None for an unmigrated database."""
    engine = create_engine(to_sync_url(database_url))
    try:
        with engine.connect() as connection:
            return MigrationContext.configure(connection).get_current_revision()
    finally:
        engine.dispose()


def run_migrations(database_url: str, revision: str = "head") -> None:
    """Upgrade the database to ``revision``."""
    sync_url = to_sync_url(database_url)

    if sync_url.startswith("sqlite"):
        db_path = sync_url.partition("///")[2]
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    command.upgrade(get_alembic_config(database_url), revision)
    logger.info("Database migrations complete (target=%s)", revision)
