"""
Site Deployment Workflow.

Turn an uploaded archive into a live site directory.

Steps:
1. Get site info - a missing site fails the workflow with no state change
2. Mark site deploying
3. Replace the site directory with the archive contents and check for HTML
4. Mark site deployed, or failed with the reason from step 3

If step 3 or the deployed write in step 4 fails for any reason, including a
timeout or cancellation, the site directory is removed before the site is
marked failed. The uploaded archive is deleted whatever the outcome. Nothing
is retried: every failure is terminal and visible on the site record.
"""

from dataclasses import dataclass
from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import ActivityError, ApplicationError

with workflow.unsafe.imports_passed_through():
    from src.sitehost.models import DeploymentStatus
    from src.sitehost.services.deployment import UNKNOWN_ERROR
    from src.sitehost.temporal.activities import (
        DeleteArchiveInput,
        DeploymentActivities,
        DeploySiteInput,
        GetSiteInput,
        GetSiteOutput,
        RemoveSiteDirInput,
        UpdateSiteStatusInput,
        get_site_info,
        update_site_status,
    )

SINGLE_ATTEMPT = RetryPolicy(maximum_attempts=1)

DEPLOY_TIMEOUT_SECONDS = 600
DEPLOY_HEARTBEAT_TIMEOUT = timedelta(minutes=2)

# Error types whose message is written for site owners.
REPORTABLE_ERRORS = ("DeploymentFailed", "SiteNotFound")


@dataclass
class DeploymentJob:
    site_id: int
    archive_path: str
    deploy_timeout_seconds: int = DEPLOY_TIMEOUT_SECONDS


@dataclass
class DeploymentResult:
    site_id: int
    subdomain: str
    status: str


def _failure_reason(error: ActivityError) -> str:
    cause = error.cause
    if (
        isinstance(cause, ApplicationError)
        and cause.type in REPORTABLE_ERRORS
        and cause.message
    ):
        return cause.message
    return UNKNOWN_ERROR


@workflow.defn
class SiteDeploymentWorkflow:
    """Deploy one archive to one site. Started with id ``site-deploy-{subdomain}``."""

    @workflow.run
    async def run(self, job: DeploymentJob) -> DeploymentResult:
        try:
            try:
                site: GetSiteOutput = await workflow.execute_activity(
                    get_site_info,
                    GetSiteInput(site_id=job.site_id),
                    start_to_close_timeout=timedelta(seconds=30),
                    retry_policy=SINGLE_ATTEMPT,
                )
            except ActivityError as e:
                raise ApplicationError(
                    _failure_reason(e), type="SiteNotFound", non_retryable=True
                ) from e

            workflow.logger.info(f"Deploying site {site.subdomain} from {job.archive_path}")
            await self._set_status(site.site_id, DeploymentStatus.DEPLOYING)

            deploy_timeout = timedelta(seconds=job.deploy_timeout_seconds)
            try:
                await workflow.execute_activity_method(
                    DeploymentActivities.deploy_site_archive,
                    DeploySiteInput(subdomain=site.subdomain, archive_path=job.archive_path),
                    start_to_close_timeout=deploy_timeout,
                    heartbeat_timeout=min(DEPLOY_HEARTBEAT_TIMEOUT, deploy_timeout),
                    retry_policy=SINGLE_ATTEMPT,
                )
            except ActivityError as e:
                reason = _failure_reason(e)
                await self._fail(site, reason)
                raise ApplicationError(reason, type="DeploymentFailed", non_retryable=True) from e

            try:
                await self._set_status(site.site_id, DeploymentStatus.DEPLOYED)
            except ActivityError as e:
                await self._fail(site, UNKNOWN_ERROR)
                raise ApplicationError(
                    UNKNOWN_ERROR, type="DeploymentFailed", non_retryable=True
                ) from e

            workflow.logger.info(f"Site {site.subdomain} deployed")
            return DeploymentResult(
                site_id=site.site_id,
                subdomain=site.subdomain,
                status=DeploymentStatus.DEPLOYED.value,
            )
        finally:
            await self._delete_archive(job.archive_path)

    async def _fail(self, site: GetSiteOutput, reason: str) -> None:
        """Remove the site directory, then record the failure."""
        workflow.logger.error(f"Deployment of {site.subdomain} failed: {reason}")
        try:
            await workflow.execute_activity_method(
                DeploymentActivities.remove_site_dir,
                RemoveSiteDirInput(subdomain=site.subdomain),
                start_to_close_timeout=timedelta(minutes=2),
                retry_policy=SINGLE_ATTEMPT,
            )
        except ActivityError as e:
            workflow.logger.warning(f"Site directory cleanup failed for {site.subdomain}: {e}")
        try:
            await self._set_status(site.site_id, DeploymentStatus.FAILED, reason)
        except ActivityError as e:
            workflow.logger.error(f"Could not mark {site.subdomain} failed: {e}")

    async def _set_status(
        self, site_id: int, status: DeploymentStatus, error: str | None = None
    ) -> None:
        await workflow.execute_activity(
            update_site_status,
            UpdateSiteStatusInput(site_id=site_id, status=status.value, error=error),
            start_to_close_timeout=timedelta(seconds=30),
            retry_policy=SINGLE_ATTEMPT,
        )

    async def _delete_archive(self, archive_path: str) -> None:
        try:
            await workflow.execute_activity_method(
                DeploymentActivities.delete_archive,
                DeleteArchiveInput(archive_path=archive_path),
                start_to_close_timeout=timedelta(seconds=30),
                retry_policy=SINGLE_ATTEMPT,
            )
        except ActivityError as e:
            workflow.logger.warning(f"Archive cleanup failed for {archive_path}: {e}")
