"""Filesystem activities for site deployments."""

import asyncio
import tarfile
from dataclasses import dataclass
from pathlib import Path

from temporalio import activity
from temporalio.exceptions import ApplicationError, CancelledError

from src.sitehost.core.config import SitesConfig
from src.sitehost.services.deployment import (
    deploy_archive,
    discard_archive,
    format_deployment_error,
)
from src.sitehost.services.site_directory import SiteDirectoryStore


@dataclass
class DeploySiteInput:
    subdomain: str
    archive_path: str


@dataclass
class DeploySiteOutput:
    site_dir: str


@dataclass
class DeleteArchiveInput:
    archive_path: str


@dataclass
class RemoveSiteDirInput:
    subdomain: str


def _heartbeat_member(member: tarfile.TarInfo) -> None:
    activity.heartbeat(member.name)
    if activity.is_cancelled():
        raise CancelledError("Deployment cancelled")


class DeploymentActivities:
    """Activities bound to one sites configuration.

    Registered on the worker as ``DeploymentActivities(config).deploy_site_archive``
    and so on. ``deploy_site_archive`` is synchronous, so the worker needs an
    ``activity_executor``.
    """

    def __init__(self, config: SitesConfig):
        self.store = SiteDirectoryStore(config)

    @activity.defn(no_thread_cancel_exception=True)
    def deploy_site_archive(self, input: DeploySiteInput) -> DeploySiteOutput:
        """
        Replace the site directory with the extracted archive.

        Heartbeats once per archive member and stops at the next member after
        a cancellation, including the one raised on heartbeat timeout.
        Failures leave no site directory behind and surface as a
        non-retryable ApplicationError whose message is the reason shown to
        the site owner.
        """
        activity.logger.info(f"Deploying archive for site: {input.subdomain}")
        try:
            site_dir = deploy_archive(
                self.store,
                input.subdomain,
                Path(input.archive_path),
                on_member=_heartbeat_member,
            )
        except CancelledError:
            activity.logger.warning(f"Deployment of {input.subdomain} cancelled")
            raise
        except Exception as e:
            reason = format_deployment_error(e)
            activity.logger.warning(f"Deployment of {input.subdomain} failed: {reason}")
            raise ApplicationError(reason, type="DeploymentFailed", non_retryable=True) from e

        activity.logger.info(f"Site {input.subdomain} extracted to {site_dir}")
        return DeploySiteOutput(site_dir=str(site_dir))

    @activity.defn
    async def remove_site_dir(self, input: RemoveSiteDirInput) -> bool:
        """Remove whatever a failed deployment left on disk."""
        removed = await asyncio.to_thread(self.store.remove, input.subdomain)
        if removed:
            activity.logger.info(f"Removed site directory for {input.subdomain}")
        return removed

    @activity.defn
    async def delete_archive(self, input: DeleteArchiveInput) -> bool:
        """Best-effort removal of the uploaded archive."""
        return await asyncio.to_thread(discard_archive, Path(input.archive_path))
