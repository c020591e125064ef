"""Decide whether a matched site may be served for a routing method."""

from src.sitehost.models import DeploymentStatus, RoutingMode, Site
from src.sitehost.serving.resolver import RoutingMethod

_ALLOWED_METHODS: dict[RoutingMode, frozenset[RoutingMethod]] = {
    RoutingMode.SUBDOMAIN: frozenset({RoutingMethod.SUBDOMAIN}),
    RoutingMode.SUBPATH: frozenset({RoutingMethod.SUBPATH}),
    RoutingMode.BOTH: frozenset({RoutingMethod.SUBDOMAIN, RoutingMethod.SUBPATH}),
}


def permit(routing_mode: str, method: RoutingMethod) -> bool:
    """Check the site's routing mode against how the request reached it.

    Unknown modes permit nothing.
    """
    try:
        mode = RoutingMode(routing_mode)
    except ValueError:
        return False
    return method in _ALLOWED_METHODS[mode]


def is_servable(site: Site, method: RoutingMethod) -> bool:
    """Serve only deployed sites reached by a permitted method.

    The status column is authoritative; the presence of a site directory is not
    consulted.
    """
    return (
        site.deployment_status == DeploymentStatus.DEPLOYED.value
        and permit(site.routing_mode, method)
    )
