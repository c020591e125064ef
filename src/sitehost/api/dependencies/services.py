"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.sitehost.api.dependencies.db import DBSession
from src.sitehost.api.dependencies.repositories import SiteRepo
from src.sitehost.core.config import SitesConfig, get_settings
from src.sitehost.services import SiteDirectoryStore, SiteService, SiteUploader


def get_sites_config() -> SitesConfig:
    return SitesConfig.from_settings(get_settings())


SitesConfigDep = Annotated[SitesConfig, Depends(get_sites_config)]


def get_site_uploader() -> SiteUploader:
    settings = get_settings()
    return SiteUploader(settings.resolved_upload_dir, settings.max_upload_size)


def get_site_service(
    site_repo: SiteRepo,
    session: DBSession,
    config: SitesConfigDep,
    uploader: Annotated[SiteUploader, Depends(get_site_uploader)],
) -> SiteService:
    return SiteService(site_repo, session, SiteDirectoryStore(config), uploader)


SiteServiceDep = Annotated[SiteService, Depends(get_site_service)]
