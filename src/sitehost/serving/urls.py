"""Public URLs of a site under the configured base domain."""

from src.sitehost.core.config import SitesConfig
from src.sitehost.models import RoutingMode, Site
from src.sitehost.serving.resolver import RoutingMethod


def subdomain_url(site: Site, config: SitesConfig) -> str:
    return f"{config.url_scheme}{site.full_domain(config.base_domain)}"


def subpath_url(site: Site, config: SitesConfig) -> str:
    return f"{config.url_scheme}{config.base_domain}{site.subpath}"


def site_url(site: Site, config: SitesConfig, method: RoutingMethod | None = None) -> str:
    """URL for ``method``, or the preferred URL for the site's routing mode.

    Sites in ``subpath`` mode prefer the subpath URL; every other mode
    prefers the subdomain URL.
    """
    if method is None:
        method = (
            RoutingMethod.SUBPATH
            if site.routing_mode == RoutingMode.SUBPATH.value
            else RoutingMethod.SUBDOMAIN
        )
    if method is RoutingMethod.SUBPATH:
        return subpath_url(site, config)
    return subdomain_url(site, config)
