"""FastAPI dependency injection definitions."""

from src.sitehost.api.dependencies.auth import require_admin_key
from src.sitehost.api.dependencies.db import DBSession, get_db_session
from src.sitehost.api.dependencies.repositories import SiteRepo, get_site_repository
from src.sitehost.api.dependencies.services import (
    SitesConfigDep,
    SiteServiceDep,
    get_site_service,
    get_site_uploader,
    get_sites_config,
)

__all__ = [
    # Auth
    "require_admin_key",
    # Database
    "DBSession",
    "get_db_session",
    # Repositories
    "SiteRepo",
    "get_site_repository",
    # Services
    "SiteServiceDep",
    "SitesConfigDep",
    "get_site_service",
    "get_site_uploader",
    "get_sites_config",
]
