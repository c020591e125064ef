"""Temporal workflows."""

from src.sitehost.temporal.workflows.site_deployment import (
    DeploymentJob,
    DeploymentResult,
    SiteDeploymentWorkflow,
)

__all__ = [
    "DeploymentJob",
    "DeploymentResult",
    "SiteDeploymentWorkflow",
]
