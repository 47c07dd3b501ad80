import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from warden.config import DatabaseConfig
from warden.infrastructure.persistence.database import create_db_engine, create_session_factory
from warden.infrastructure.persistence.tables import metadata


@pytest_asyncio.fixture()
async def session() -> AsyncSession:
    engine = create_db_engine(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    async with create_session_factory(engine)() as session:
        yield session
    await engine.dispose()
