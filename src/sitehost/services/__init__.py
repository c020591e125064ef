"""Service layer."""

from src.sitehost.services.site_directory import SiteDirectoryStore
from src.sitehost.services.site_service import SiteService
from src.sitehost.services.uploads import SiteUploader

__all__ = [
    "SiteDirectoryStore",
    "SiteService",
    "SiteUploader",
]
