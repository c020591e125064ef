"""Request-scoped database session."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.sitehost.core.db import get_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """One session per API request. Services commit; anything left open is rolled back."""
    async with get_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


DBSession = Annotated[AsyncSession, Depends(get_db_session)]
