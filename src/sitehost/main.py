from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.sitehost.api.middlewares import setup_middlewares
from src.sitehost.api.v1.router import api_router
from src.sitehost.core.config import get_settings
from src.sitehost.core.db import dispose_engine
from src.sitehost.core.exceptions import setup_exception_handlers
from src.sitehost.core.health import setup_health_endpoint, setup_metrics
from src.sitehost.core.logging import get_logger, setup_logging
from src.sitehost.serving.middleware import SiteLookup, lookup_site
from src.sitehost.temporal.client import close_temporal_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug, access_log=settings.access_log)
    logger.info(
        f"Starting {settings.app_name}",
        base_domain=settings.base_domain,
        static_root=str(settings.static_root),
    )

    yield

    logger.info("Closing connections...")
    await close_temporal_client()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "sites", "description": "Site management and deployments"},
]


def create_app(site_lookup: SiteLookup = lookup_site) -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant static site hosting with Temporal deployments",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)
    setup_middlewares(app, settings, site_lookup=site_lookup)

    app.include_router(api_router)
    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
