from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.sitehost.core.config import SitesConfig
from src.sitehost.core.validators import MAX_SUBDOMAIN_LENGTH, validate_subdomain_format
from src.sitehost.models import DeploymentStatus, RoutingMode, Site
from src.sitehost.serving.urls import site_url, subdomain_url, subpath_url


class SiteCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    subdomain: str = Field(
        min_length=1,
        max_length=MAX_SUBDOMAIN_LENGTH,
        json_schema_extra={
            "examples": ["acme", "beta-launch", "site123"],
            "description": "Lowercase letters, numbers and hyphens only.",
        },
    )
    routing_mode: RoutingMode = RoutingMode.SUBDOMAIN

    @field_validator("subdomain")
    @classmethod
    def validate_subdomain(cls, v: str) -> str:
        return validate_subdomain_format(v)


class SiteUpdate(BaseModel):
    """Partial update. The subdomain cannot be changed."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    routing_mode: RoutingMode | None = None


class SiteRead(BaseModel):
    id: int
    name: str
    subdomain: str
    routing_mode: RoutingMode
    deployment_status: DeploymentStatus
    last_deployed_at: datetime | None = None
    last_deployment_error: str | None = None
    created_at: datetime
    updated_at: datetime
    url: str
    subdomain_url: str
    subpath_url: str

    @classmethod
    def from_site(cls, site: Site, config: SitesConfig) -> "SiteRead":
        return cls(
            id=site.id,  # type: ignore[arg-type]
            name=site.name,
            subdomain=site.subdomain,
            routing_mode=RoutingMode(site.routing_mode),
            deployment_status=site.status_enum,
            last_deployed_at=site.last_deployed_at,
            last_deployment_error=site.last_deployment_error,
            created_at=site.created_at,
            updated_at=site.updated_at,
            url=site_url(site, config),
            subdomain_url=subdomain_url(site, config),
            subpath_url=subpath_url(site, config),
        )


class SiteStatusResponse(BaseModel):
    """Deployment status of a site."""

    subdomain: str
    status: DeploymentStatus
    last_deployed_at: datetime | None = None
    error: str | None = None
    updated_at: datetime

    @classmethod
    def from_site(cls, site: Site) -> "SiteStatusResponse":
        return cls(
            subdomain=site.subdomain,
            status=site.status_enum,
            last_deployed_at=site.last_deployed_at,
            error=site.last_deployment_error,
            updated_at=site.updated_at,
        )


class DeploymentScheduledResponse(BaseModel):
    """Response when a deployment workflow is started."""

    workflow_id: str
    subdomain: str
    status: str = DeploymentStatus.PENDING.value
