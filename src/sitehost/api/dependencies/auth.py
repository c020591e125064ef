"""Admin API key dependency."""

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from src.sitehost.core.config import get_settings

admin_key_header = APIKeyHeader(name="X-Admin-Key", auto_error=False)


async def require_admin_key(api_key: str | None = Depends(admin_key_header)) -> None:
    """Reject requests without the configured admin key. Open when no key is configured."""
    expected = get_settings().admin_api_key
    if expected is None:
        return
    if api_key is None or not secrets.compare_digest(api_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing admin API key",
        )
