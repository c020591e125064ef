"""Temporal activities for site deployments."""

from src.sitehost.temporal.activities.deployment import (
    DeleteArchiveInput,
    DeploymentActivities,
    DeploySiteInput,
    DeploySiteOutput,
    RemoveSiteDirInput,
)
from src.sitehost.temporal.activities.site import (
    GetSiteInput,
    GetSiteOutput,
    UpdateSiteStatusInput,
    get_site_info,
    update_site_status,
)

__all__ = [
    # Site records
    "GetSiteInput",
    "GetSiteOutput",
    "UpdateSiteStatusInput",
    "get_site_info",
    "update_site_status",
    # Filesystem
    "DeleteArchiveInput",
    "DeploySiteInput",
    "DeploySiteOutput",
    "DeploymentActivities",
    "RemoveSiteDirInput",
]
