"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.sitehost.api.dependencies.db import DBSession
from src.sitehost.repositories import SiteRepository


def get_site_repository(session: DBSession) -> SiteRepository:
    return SiteRepository(session)


SiteRepo = Annotated[SiteRepository, Depends(get_site_repository)]
