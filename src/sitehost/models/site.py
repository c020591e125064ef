"""Site model - one row per hosted static site."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from src.sitehost.core.validators import MAX_SUBDOMAIN_LENGTH
from src.sitehost.models.base import utc_now
from src.sitehost.models.enums import DeploymentStatus, RoutingMode

SUBPATH_PREFIX = "/sites"


class Site(SQLModel, table=True):
    """Hosted site registry."""

    __tablename__ = "sites"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=100)
    subdomain: str = Field(max_length=MAX_SUBDOMAIN_LENGTH, unique=True, index=True)
    routing_mode: str = Field(default=RoutingMode.SUBDOMAIN.value, max_length=20)
    deployment_status: str = Field(default=DeploymentStatus.PENDING.value, max_length=20)
    last_deployed_at: datetime | None = Field(default=None)
    last_deployment_error: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def subpath(self) -> str:
        """Mount point for subpath routing, e.g. '/sites/acme'."""
        return f"{SUBPATH_PREFIX}/{self.subdomain}"

    @property
    def status_enum(self) -> DeploymentStatus:
        """Get deployment status as DeploymentStatus enum."""
        return DeploymentStatus(self.deployment_status)

    @property
    def is_deployed(self) -> bool:
        return self.deployment_status == DeploymentStatus.DEPLOYED.value

    def full_domain(self, base_domain: str) -> str:
        """Host name that serves this site in subdomain mode."""
        return f"{self.subdomain}.{base_domain}"
