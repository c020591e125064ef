"""Repository for Site entity."""

from typing import Any

from sqlmodel import select

from src.sitehost.models import Site
from src.sitehost.repositories.base import BaseRepository


class SiteRepository(BaseRepository[Site]):
    model = Site

    async def get_by_subdomain(self, subdomain: str) -> Site | None:
        """Get site by subdomain. Subdomains are unique."""
        result = await self.session.execute(select(Site).where(Site.subdomain == subdomain))
        return result.scalar_one_or_none()

    async def exists_by_subdomain(self, subdomain: str) -> bool:
        return await self.get_by_subdomain(subdomain) is not None

    async def list_all(self, *order_by: Any) -> list[Site]:
        """List sites, oldest first unless an ordering is given."""
        return await super().list_all(*(order_by or (Site.created_at, Site.id)))
