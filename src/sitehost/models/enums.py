"""Shared enums for models."""

from enum import Enum


class RoutingMode(str, Enum):
    """How requests may reach a site's files."""

    SUBDOMAIN = "subdomain"
    SUBPATH = "subpath"
    BOTH = "both"


class DeploymentStatus(str, Enum):
    """Site deployment status."""

    PENDING = "pending"
    DEPLOYING = "deploying"
    DEPLOYED = "deployed"
    FAILED = "failed"
