"""Serve static site files ahead of the application routes."""

from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.sitehost.core.config import SitesConfig
from src.sitehost.core.db import get_session
from src.sitehost.core.logging import bind_site_context, get_logger
from src.sitehost.models import Site
from src.sitehost.repositories import SiteRepository
from src.sitehost.serving.files import (
    is_contained,
    normalize_path,
    resolve_file,
    strip_mount_prefix,
)
from src.sitehost.serving.gate import is_servable
from src.sitehost.serving.resolver import RouteMatch, RoutingMethod, SiteResolver
from src.sitehost.serving.responder import not_found, respond

logger = get_logger(__name__)

SiteLookup = Callable[[str], Awaitable[Site | None]]


async def lookup_site(subdomain: str) -> Site | None:
    """Load a site by subdomain using a short-lived session."""
    async with get_session() as session:
        return await SiteRepository(session).get_by_subdomain(subdomain)


class SiteRoutingMiddleware(BaseHTTPMiddleware):
    """Answer requests addressed to a deployed site with its static files.

    Requests that resolve to no site, to an unknown site, to a site whose
    routing mode does not allow the method used, or to a site that is not
    deployed continue to the application untouched. So do requests whose site
    lookup fails, after the error is logged. Once a site is served,
    routing stops here: missing files get the generic 404 page.
    """

    def __init__(
        self,
        app: ASGIApp,
        config: SitesConfig,
        site_lookup: SiteLookup = lookup_site,
    ):
        super().__init__(app)
        self.config = config
        self.resolver = SiteResolver(config)
        self.site_lookup = site_lookup

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        match = self.resolver.resolve(request.headers.get("host", ""), request.url.path)
        if not match.matched or match.subdomain is None:
            return await call_next(request)

        try:
            site = await self.site_lookup(match.subdomain)
        except Exception:
            logger.exception("Site lookup failed", site=match.subdomain)
            return await call_next(request)
        if site is None or not is_servable(site, match.method):
            return await call_next(request)

        bind_site_context(site.subdomain, match.method.value)
        return self.serve(site, match, request.url.path)

    def serve(self, site: Site, match: RouteMatch, request_path: str) -> Response:
        path = request_path
        if match.method is RoutingMethod.SUBPATH:
            path = strip_mount_prefix(path, site.subdomain)

        site_dir = self.config.site_dir(site.subdomain)
        file_path = resolve_file(site_dir, normalize_path(path))
        if file_path is None:
            return not_found()

        if not is_contained(file_path, site_dir):
            logger.warning(
                "Path traversal attempt blocked",
                security_event="path_traversal",
                site=site.subdomain,
                path=request_path,
            )
            return not_found()

        return respond(file_path)
