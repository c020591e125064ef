"""Integration fixtures backed by PostgreSQL.

Tests here are skipped when the database from DATABASE_URL cannot be reached.
"""

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from src.sitehost.core import db
from src.sitehost.core.config import get_settings
from src.sitehost.models import Site


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Test engine with the sites table in place."""
    await db.dispose_engine()

    test_engine = create_async_engine(get_settings().database_url, poolclass=NullPool)
    try:
        async with test_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
    except (OSError, SQLAlchemyError) as e:
        await test_engine.dispose()
        pytest.skip(f"PostgreSQL not available: {e}")

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.execute(delete(Site))
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Async session for direct database access. Tests must commit explicitly."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session
