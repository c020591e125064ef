"""Site management service."""

import asyncio

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from temporalio.exceptions import WorkflowAlreadyStartedError
from temporalio.common import RetryPolicy

from src.sitehost.core.config import get_settings
from src.sitehost.core.exceptions import (
    DeploymentInProgressError,
    SiteAlreadyExistsError,
    SiteNotFoundError,
)
from src.sitehost.core.logging import get_logger
from src.sitehost.models import RoutingMode, Site, utc_now
from src.sitehost.repositories import SiteRepository
from src.sitehost.services.site_directory import SiteDirectoryStore
from src.sitehost.services.uploads import SiteUploader
from src.sitehost.temporal.client import get_temporal_client
from src.sitehost.temporal.workflows import DeploymentJob, SiteDeploymentWorkflow

logger = get_logger(__name__)


class SiteService:
    """Site management service - business logic only."""

    def __init__(
        self,
        site_repo: SiteRepository,
        session: AsyncSession,
        store: SiteDirectoryStore,
        uploader: SiteUploader,
    ):
        self.site_repo = site_repo
        self.session = session
        self.store = store
        self.uploader = uploader

    @staticmethod
    def get_workflow_id(subdomain: str) -> str:
        """Deterministic workflow ID, one running deployment per subdomain."""
        return f"site-deploy-{subdomain}"

    async def create_site(
        self, name: str, subdomain: str, routing_mode: RoutingMode = RoutingMode.SUBDOMAIN
    ) -> Site:
        """Register a new site in ``pending`` state.

        Raises:
            SiteAlreadyExistsError: If the subdomain is taken
        """
        if await self.site_repo.exists_by_subdomain(subdomain):
            raise SiteAlreadyExistsError(f"Site with subdomain '{subdomain}' already exists")

        # Unique constraint on subdomain handles remaining races
        try:
            site = Site(name=name, subdomain=subdomain, routing_mode=routing_mode.value)
            self.site_repo.add(site)
            await self.session.commit()
            await self.session.refresh(site)
        except IntegrityError as e:
            await self.session.rollback()
            raise SiteAlreadyExistsError(
                f"Site with subdomain '{subdomain}' already exists"
            ) from e

        logger.info("Site created", site=subdomain, routing_mode=site.routing_mode)
        return site

    async def list_sites(self) -> list[Site]:
        return await self.site_repo.list_all()

    async def get_site(self, subdomain: str) -> Site:
        """Get site by subdomain.

        Raises:
            SiteNotFoundError: If no site has this subdomain
        """
        site = await self.site_repo.get_by_subdomain(subdomain)
        if site is None:
            raise SiteNotFoundError(f"Site '{subdomain}' not found")
        return site

    async def update_site(
        self,
        subdomain: str,
        name: str | None = None,
        routing_mode: RoutingMode | None = None,
    ) -> Site:
        site = await self.get_site(subdomain)
        if name is not None:
            site.name = name
        if routing_mode is not None:
            site.routing_mode = routing_mode.value
        site.updated_at = utc_now()
        try:
            await self.session.commit()
            await self.session.refresh(site)
        except Exception:
            await self.session.rollback()
            raise
        return site

    async def delete_site(self, subdomain: str) -> None:
        """Delete the site record, then its deployed files."""
        site = await self.get_site(subdomain)
        try:
            await self.site_repo.delete(site)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        removed = await asyncio.to_thread(self.store.remove, subdomain)
        logger.info("Site deleted", site=subdomain, files_removed=removed)

    async def schedule_deployment(self, subdomain: str, upload: UploadFile) -> str:
        """
        Store an uploaded archive and start the deployment workflow.

        Returns the workflow_id. The workflow marks the site deploying, extracts
        the archive and marks it deployed or failed.

        Raises:
            SiteNotFoundError: If no site has this subdomain
            InvalidUploadError: If the upload is not a gzip archive or too large
            DeploymentInProgressError: If a deployment for this site is running
        """
        site = await self.get_site(subdomain)
        archive_path = await self.uploader.store(subdomain, upload)

        settings = get_settings()
        workflow_id = self.get_workflow_id(subdomain)
        try:
            client = await get_temporal_client()
            await client.start_workflow(
                SiteDeploymentWorkflow.run,
                DeploymentJob(
                    site_id=site.id,  # type: ignore[arg-type]
                    archive_path=str(archive_path),
                ),
                id=workflow_id,
                task_queue=settings.temporal_task_queue,
                retry_policy=RetryPolicy(maximum_attempts=1),
            )
        except WorkflowAlreadyStartedError as e:
            await asyncio.to_thread(self.uploader.discard, archive_path)
            raise DeploymentInProgressError(
                f"A deployment for '{subdomain}' is already in progress"
            ) from e
        except Exception:
            await asyncio.to_thread(self.uploader.discard, archive_path)
            raise

        logger.info("Deployment scheduled", site=subdomain, workflow_id=workflow_id)
        return workflow_id
