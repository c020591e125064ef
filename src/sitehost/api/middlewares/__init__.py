"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.sitehost.core.config import Settings, SitesConfig
from src.sitehost.serving import SiteRoutingMiddleware
from src.sitehost.serving.middleware import SiteLookup, lookup_site

from .logging_context import logging_context_middleware

__all__ = [
    "setup_middlewares",
    "logging_context_middleware",
]


def setup_middlewares(
    app: FastAPI, settings: Settings, site_lookup: SiteLookup = lookup_site
) -> None:
    """Configure all application middlewares.

    Each add_middleware call wraps the previous ones, so the last one added
    runs first on a request.
    """
    # Site routing - innermost, serves site files before the API routes
    app.add_middleware(
        SiteRoutingMiddleware,
        config=SitesConfig.from_settings(settings),
        site_lookup=site_lookup,
    )

    # Logging context - binds request_id to structlog context
    @app.middleware("http")
    async def _logging_context(request, call_next):  # type: ignore[no-untyped-def]
        return await logging_context_middleware(request, call_next)

    # CORS - handle cross-origin requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "X-Admin-Key", "X-Request-ID"],
    )

    # Correlation ID - generates/propagates X-Request-ID, outermost
    app.add_middleware(CorrelationIdMiddleware)
