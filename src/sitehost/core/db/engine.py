"""Database engines for the API (asyncpg) and the deployment worker (psycopg2)."""

import ssl
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.sitehost.core.config import Settings, get_settings

_engine: AsyncEngine | None = None
_sync_engine: Engine | None = None


def ssl_context_for(ssl_mode: str) -> ssl.SSLContext | None:
    """Build the asyncpg SSL context for a libpq-style ``sslmode``."""
    if ssl_mode == "disable":
        return None
    context = ssl.create_default_context()
    if ssl_mode in ("verify-ca", "verify-full"):
        context.check_hostname = ssl_mode == "verify-full"
        context.verify_mode = ssl.CERT_REQUIRED
    else:
        # prefer / require: encrypt without verifying the server
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def sync_database_url(settings: Settings) -> str:
    """The configured URL with the asyncpg driver swapped for psycopg2."""
    return settings.database_url.replace("+asyncpg", "")


def get_engine() -> AsyncEngine:
    """Get or create the API's async engine."""
    global _engine
    if _engine is None:
        settings = get_settings()
        connect_args: dict[str, Any] = {}
        context = ssl_context_for(settings.database_ssl_mode)
        if context is not None:
            connect_args["ssl"] = context
        _engine = create_async_engine(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
    return _engine


async def dispose_engine() -> None:
    """Dispose the async engine. Call during API shutdown."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None


def get_sync_engine() -> Engine:
    """Get or create the worker's sync engine.

    Site record activities run in threads and write through psycopg2,
    which takes ``sslmode`` directly.
    """
    global _sync_engine
    if _sync_engine is None:
        settings = get_settings()
        _sync_engine = create_engine(
            sync_database_url(settings),
            pool_pre_ping=True,
            connect_args={"sslmode": settings.database_ssl_mode},
        )
    return _sync_engine


def dispose_sync_engine() -> None:
    """Dispose the sync engine. Call on worker shutdown."""
    global _sync_engine
    if _sync_engine is not None:
        _sync_engine.dispose()
        _sync_engine = None
