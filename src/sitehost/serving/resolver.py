"""Map an inbound host and path to the site it addresses.

Subpath routing (``/sites/{subdomain}/...``) is the more specific match and is
tried first; host-based subdomain routing is the fallback. A request that
matches neither is not an error, it simply continues to the application.
"""

from dataclasses import dataclass
from enum import Enum

from src.sitehost.core.config import SitesConfig
from src.sitehost.core.validators import SUBDOMAIN_PATTERN

DEV_HOST_SUFFIX = ".localhost"


class RoutingMethod(str, Enum):
    """How a request addressed a site."""

    SUBDOMAIN = "subdomain"
    SUBPATH = "subpath"
    NONE = "none"


@dataclass(frozen=True)
class RouteMatch:
    method: RoutingMethod
    subdomain: str | None = None

    @property
    def matched(self) -> bool:
        return self.method is not RoutingMethod.NONE


NO_MATCH = RouteMatch(RoutingMethod.NONE)


def strip_port(host: str) -> str:
    """Drop a ``:port`` suffix and lower-case the host."""
    return host.split(":", 1)[0].lower()


def subdomain_from_path(path: str) -> str | None:
    """Return ``name`` for paths shaped like ``/sites/{name}[/...]``."""
    parts = path.split("/", 3)
    if len(parts) < 3 or parts[0] != "" or parts[1] != "sites":
        return None
    name = parts[2]
    if name and SUBDOMAIN_PATTERN.fullmatch(name):
        return name
    return None


def subdomain_from_host(host: str, base_domain: str) -> str | None:
    """Return the leading label(s) of ``host`` under the dev or base domain."""
    host = strip_port(host)
    if host.endswith(DEV_HOST_SUFFIX):
        return host.removesuffix(DEV_HOST_SUFFIX) or None

    suffix = f".{strip_port(base_domain)}"
    if host.endswith(suffix):
        return host.removesuffix(suffix) or None
    return None


class SiteResolver:
    """Resolves requests to candidate sites for one base domain."""

    def __init__(self, config: SitesConfig):
        self.config = config

    def resolve(self, host: str, path: str) -> RouteMatch:
        subdomain = subdomain_from_path(path)
        if subdomain is not None:
            return RouteMatch(RoutingMethod.SUBPATH, subdomain)

        subdomain = subdomain_from_host(host, self.config.base_domain)
        if subdomain is not None:
            return RouteMatch(RoutingMethod.SUBDOMAIN, subdomain)

        return NO_MATCH
