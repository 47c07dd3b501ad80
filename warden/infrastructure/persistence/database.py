"""Async engine and session factory.

SQLite runs on a single shared connection (StaticPool) so an in-memory
database survives across sessions, and with SQLAlchemy owning BEGIN so that
the SAVEPOINTs used by the stores nest correctly. PostgreSQL uses a regular
connection pool.
"""

import os
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from warden.config import DatabaseConfig

_MEMORY = ":memory:"


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _expand_sqlite_path(url: str) -> str:
    """Make a SQLite file path absolute (expanding ~) and create its directory."""
    if not is_sqlite(url):
        return url

    prefix, _, path = url.partition("///")
    if not path or path == _MEMORY:
        return url

    abs_path = Path(os.path.expanduser(path)).absolute()
    abs_path.parent.mkdir(parents=True, exist_ok=True)
    return f"{prefix}///{abs_path}"


def _engine_options(url: str, config: DatabaseConfig) -> dict[str, Any]:
    if is_sqlite(url):
        return {
            "echo": config.echo,
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "echo": config.echo,
        "pool_pre_ping": True,
        "pool_size": config.pool_size,
        "max_overflow": config.max_overflow,
    }


def _let_sqlalchemy_begin(engine: AsyncEngine) -> None:
    # The sqlite3 driver otherwise issues its own BEGIN and breaks SAVEPOINT nesting
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


def create_db_engine(config: DatabaseConfig) -> AsyncEngine:
    url = _expand_sqlite_path(config.url)
    engine = create_async_engine(url, **_engine_options(url, config))
    if is_sqlite(url):
        _let_sqlalchemy_begin(engine)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """One session per unit of work; objects stay usable after commit."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
