"""Health and metrics endpoints.

``/health`` reports each dependency and caches the result briefly so probes do
not hit the database on every call. Site serving needs the database and the
static root; Temporal only affects deployments, so losing it degrades the
service instead of failing it.
"""

import asyncio
import os
import secrets
import time
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text

from src.sitehost.core.config import SitesConfig, get_settings
from src.sitehost.core.db import get_session
from src.sitehost.temporal.client import get_temporal_client

HEALTH_CACHE_TTL = 10  # seconds
HEALTHY = "healthy"

_health_cache: dict[str, Any] | None = None
_health_cache_time: float = 0


def reset_health_cache() -> None:
    global _health_cache, _health_cache_time
    _health_cache = None
    _health_cache_time = 0


async def check_database() -> str:
    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        return f"unhealthy: {e!s}"
    return HEALTHY


async def check_temporal() -> str:
    try:
        await get_temporal_client()
    except Exception as e:
        return f"unhealthy: {e!s}"
    return HEALTHY


def _storage_status(sites_root: str) -> str:
    if not os.path.exists(sites_root):
        # Nothing deployed yet, the worker creates it
        return HEALTHY
    if not os.path.isdir(sites_root):
        return f"unhealthy: {sites_root} is not a directory"
    if not os.access(sites_root, os.R_OK | os.X_OK):
        return f"unhealthy: {sites_root} is not readable"
    return HEALTHY


async def check_storage() -> str:
    sites_root = SitesConfig.from_settings(get_settings()).sites_root
    return await asyncio.to_thread(_storage_status, str(sites_root))


def overall_status(checks: dict[str, str]) -> str:
    if checks["database"] != HEALTHY or checks["storage"] != HEALTHY:
        return "unhealthy"
    if checks["temporal"] != HEALTHY:
        return "degraded"
    return HEALTHY


def setup_health_endpoint(app: FastAPI) -> None:
    @app.get("/health")
    async def health() -> JSONResponse:
        global _health_cache, _health_cache_time

        now = time.time()
        if _health_cache and (now - _health_cache_time) < HEALTH_CACHE_TTL:
            body = {
                **_health_cache,
                "cached": True,
                "cache_age_seconds": round(now - _health_cache_time, 1),
            }
        else:
            checks = {
                "database": await check_database(),
                "storage": await check_storage(),
                "temporal": await check_temporal(),
            }
            body = {
                "status": overall_status(checks),
                **checks,
                "cached": False,
                "timestamp": now,
            }
            _health_cache = body
            _health_cache_time = now

        status_code = 200 if body["status"] == HEALTHY else 503
        return JSONResponse(content=body, status_code=status_code)


def setup_metrics(app: FastAPI) -> None:
    """Expose Prometheus metrics at /metrics, behind X-Metrics-Key when one is configured."""
    settings = get_settings()
    instrumentator = Instrumentator().instrument(app)

    if not settings.metrics_api_key:
        instrumentator.expose(app, endpoint="/metrics")
        return

    expected_key = settings.metrics_api_key
    api_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

    async def verify_metrics_key(api_key: str | None = Depends(api_key_header)) -> None:
        if api_key is None or not secrets.compare_digest(api_key, expected_key):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing metrics API key",
            )

    instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(verify_metrics_key)])
