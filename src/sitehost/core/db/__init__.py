"""Database utilities - engine and session."""

from src.sitehost.core.db.engine import (
    dispose_engine,
    dispose_sync_engine,
    get_engine,
    get_sync_engine,
)
from src.sitehost.core.db.session import get_session

__all__ = [
    # Engine (async)
    "dispose_engine",
    "get_engine",
    # Engine (sync - for Temporal activities)
    "dispose_sync_engine",
    "get_sync_engine",
    # Session
    "get_session",
]
