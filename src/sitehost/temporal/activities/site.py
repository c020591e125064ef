"""Site record activities - the worker's only writers of deployment fields."""

import asyncio
from dataclasses import dataclass

from sqlmodel import Session, select
from temporalio import activity
from temporalio.exceptions import ApplicationError

from src.sitehost.core.db import get_sync_engine
from src.sitehost.models import DeploymentStatus, Site, utc_now


@dataclass
class GetSiteInput:
    site_id: int


@dataclass
class GetSiteOutput:
    site_id: int
    subdomain: str


@dataclass
class UpdateSiteStatusInput:
    site_id: int
    status: str  # "deploying", "deployed", "failed"
    error: str | None = None


def _sync_get_site_info(site_id: int) -> GetSiteOutput | None:
    """Synchronous site lookup."""
    with Session(get_sync_engine()) as session:
        site = session.scalars(select(Site).where(Site.id == site_id)).first()
        if site is None:
            return None
        return GetSiteOutput(site_id=site_id, subdomain=site.subdomain)


@activity.defn
async def get_site_info(input: GetSiteInput) -> GetSiteOutput:
    """
    Load the site a deployment targets.

    Read-only. A missing site is reported as a non-retryable failure so
    the workflow stops without touching any state.

    Raises:
        ApplicationError: type ``SiteNotFound`` if no site has ``site_id``
    """
    activity.logger.info(f"Getting site info for: {input.site_id}")
    result = await asyncio.to_thread(_sync_get_site_info, input.site_id)
    if result is None:
        raise ApplicationError(
            f"Site {input.site_id} not found", type="SiteNotFound", non_retryable=True
        )
    return result


def _sync_update_site_status(site_id: int, status: str, error: str | None) -> bool:
    """Synchronous deployment status update."""
    try:
        new_status = DeploymentStatus(status)
    except ValueError as e:
        raise ValueError(f"Invalid deployment status: {status}") from e

    with Session(get_sync_engine()) as session:
        site = session.scalars(select(Site).where(Site.id == site_id)).first()
        if site is None:
            return False

        now = utc_now()
        site.deployment_status = new_status.value
        site.updated_at = now
        if new_status is DeploymentStatus.FAILED:
            site.last_deployment_error = error
        else:
            site.last_deployment_error = None
        if new_status is DeploymentStatus.DEPLOYED:
            site.last_deployed_at = now

        session.add(site)
        session.commit()
        return True


@activity.defn
async def update_site_status(input: UpdateSiteStatusInput) -> bool:
    """
    Set a site's deployment status.

    ``deploying`` and ``deployed`` clear ``last_deployment_error``;
    ``deployed`` also stamps ``last_deployed_at``; ``failed`` records
    ``input.error``. Setting a value is idempotent.

    Returns:
        True if the site was updated, False if it no longer exists
    """
    activity.logger.info(f"Updating site {input.site_id} status to: {input.status}")
    return await asyncio.to_thread(
        _sync_update_site_status, input.site_id, input.status, input.error
    )
