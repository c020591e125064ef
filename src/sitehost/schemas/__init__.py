from src.sitehost.schemas.site import (
    DeploymentScheduledResponse,
    SiteCreate,
    SiteRead,
    SiteStatusResponse,
    SiteUpdate,
)

__all__ = [
    "DeploymentScheduledResponse",
    "SiteCreate",
    "SiteRead",
    "SiteStatusResponse",
    "SiteUpdate",
]
