"""Repository layer for data access."""

from src.sitehost.repositories.base import BaseRepository
from src.sitehost.repositories.site import SiteRepository

__all__ = [
    "BaseRepository",
    "SiteRepository",
]
