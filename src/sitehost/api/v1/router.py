from fastapi import APIRouter, Depends

from src.sitehost.api.dependencies import require_admin_key
from src.sitehost.api.v1 import sites

api_router = APIRouter(prefix="/api/v1", dependencies=[Depends(require_admin_key)])
api_router.include_router(sites.router)
