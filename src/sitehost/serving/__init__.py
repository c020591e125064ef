"""Static site serving - host/path resolution and file responses."""

from src.sitehost.serving.gate import is_servable, permit
from src.sitehost.serving.middleware import SiteRoutingMiddleware, lookup_site
from src.sitehost.serving.resolver import RouteMatch, RoutingMethod, SiteResolver

__all__ = [
    "RouteMatch",
    "RoutingMethod",
    "SiteResolver",
    "SiteRoutingMiddleware",
    "is_servable",
    "lookup_site",
    "permit",
]
