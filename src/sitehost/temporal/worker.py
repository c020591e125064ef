"""
Temporal Worker - Separate process from API.

Run with:
    python -m src.sitehost.temporal.worker
    python -m src.sitehost.temporal.worker --health-port 8001
"""

import argparse
import asyncio
from concurrent.futures import Executor, ThreadPoolExecutor

import uvicorn
from fastapi import FastAPI
from temporalio.client import Client
from temporalio.worker import Worker

from src.sitehost.core.config import Settings, SitesConfig, get_settings
from src.sitehost.core.db import dispose_sync_engine
from src.sitehost.core.logging import get_logger, setup_logging
from src.sitehost.temporal.activities import (
    DeploymentActivities,
    get_site_info,
    update_site_status,
)
from src.sitehost.temporal.workflows import SiteDeploymentWorkflow

logger = get_logger(__name__)

WORKER_HEALTH_PORT = 8001


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Site deployment worker")
    parser.add_argument(
        "--health-port",
        type=int,
        default=WORKER_HEALTH_PORT,
        help=f"Port for the worker health server (default: {WORKER_HEALTH_PORT})",
    )
    return parser.parse_args()


def create_worker(
    client: Client,
    settings: Settings,
    *,
    max_concurrent_activities: int = 10,
    max_concurrent_workflow_tasks: int = 20,
    activity_executor: Executor | None = None,
) -> Worker:
    """Create the deployment worker.

    Deployments are disk-bound, so activity concurrency is kept low. Archive
    extraction runs on ``activity_executor``, a thread pool sized to
    ``max_concurrent_activities`` unless one is given.
    """
    if activity_executor is None:
        activity_executor = ThreadPoolExecutor(max_workers=max_concurrent_activities)
    deployment_activities = DeploymentActivities(SitesConfig.from_settings(settings))
    return Worker(
        client,
        task_queue=settings.temporal_task_queue,
        workflows=[SiteDeploymentWorkflow],
        activities=[
            get_site_info,
            update_site_status,
            deployment_activities.deploy_site_archive,
            deployment_activities.remove_site_dir,
            deployment_activities.delete_archive,
        ],
        activity_executor=activity_executor,
        max_concurrent_activities=max_concurrent_activities,
        max_concurrent_workflow_tasks=max_concurrent_workflow_tasks,
    )


async def run_health_server(task_queue: str, port: int = WORKER_HEALTH_PORT) -> None:
    """Run a lightweight health server for K8s probes."""
    health_app = FastAPI(title="Site Deployment Worker Health")

    @health_app.get("/health")
    async def health() -> dict[str, str]:
        return {
            "status": "healthy",
            "service": "temporal-worker",
            "task_queue": task_queue,
        }

    @health_app.get("/ready")
    async def ready() -> dict[str, str]:
        return {"status": "ready"}

    config = uvicorn.Config(
        health_app,
        host="0.0.0.0",
        port=port,
        log_level="warning",
    )
    server = uvicorn.Server(config)
    logger.info(f"Starting health server on port {port}")
    await server.serve()


async def main() -> None:
    """Main entry point for the Temporal worker."""
    args = parse_args()
    settings = get_settings()
    setup_logging(settings.debug)

    client = await Client.connect(
        settings.temporal_host,
        namespace=settings.temporal_namespace,
    )
    executor = ThreadPoolExecutor(max_workers=10)
    worker = create_worker(client, settings, activity_executor=executor)

    logger.info(f"Polling task queue: {settings.temporal_task_queue}")
    logger.info(f"Serving sites from: {settings.static_root}")

    try:
        await asyncio.gather(
            run_health_server(settings.temporal_task_queue, args.health_port),
            worker.run(),
        )
    finally:
        executor.shutdown(wait=False)
        dispose_sync_engine()


if __name__ == "__main__":
    asyncio.run(main())
