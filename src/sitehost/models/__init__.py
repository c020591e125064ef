"""Model exports.

Import from here: `from src.sitehost.models import Site, DeploymentStatus`
"""

from src.sitehost.models.base import utc_now
from src.sitehost.models.enums import DeploymentStatus, RoutingMode
from src.sitehost.models.site import Site

__all__ = [
    # Enums
    "DeploymentStatus",
    "RoutingMode",
    # Models
    "Site",
    # Helpers
    "utc_now",
]
