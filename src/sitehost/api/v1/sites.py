"""Site management endpoints."""

from fastapi import APIRouter, File, HTTPException, Response, UploadFile, status

from src.sitehost.api.dependencies import SitesConfigDep, SiteServiceDep
from src.sitehost.core.exceptions import (
    DeploymentInProgressError,
    InvalidUploadError,
    SiteAlreadyExistsError,
    SiteNotFoundError,
    UploadTooLargeError,
)
from src.sitehost.schemas.site import (
    DeploymentScheduledResponse,
    SiteCreate,
    SiteRead,
    SiteStatusResponse,
    SiteUpdate,
)

router = APIRouter(prefix="/sites", tags=["sites"])


def _not_found(e: SiteNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post(
    "",
    response_model=SiteRead,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Subdomain already taken"}},
)
async def create_site(
    request: SiteCreate,
    service: SiteServiceDep,
    config: SitesConfigDep,
) -> SiteRead:
    try:
        site = await service.create_site(request.name, request.subdomain, request.routing_mode)
    except SiteAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return SiteRead.from_site(site, config)


@router.get("", response_model=list[SiteRead])
async def list_sites(service: SiteServiceDep, config: SitesConfigDep) -> list[SiteRead]:
    sites = await service.list_sites()
    return [SiteRead.from_site(site, config) for site in sites]


@router.get(
    "/{subdomain}",
    response_model=SiteRead,
    responses={404: {"description": "Site not found"}},
)
async def get_site(subdomain: str, service: SiteServiceDep, config: SitesConfigDep) -> SiteRead:
    try:
        site = await service.get_site(subdomain)
    except SiteNotFoundError as e:
        raise _not_found(e) from e
    return SiteRead.from_site(site, config)


@router.patch(
    "/{subdomain}",
    response_model=SiteRead,
    responses={404: {"description": "Site not found"}},
)
async def update_site(
    subdomain: str,
    request: SiteUpdate,
    service: SiteServiceDep,
    config: SitesConfigDep,
) -> SiteRead:
    """Rename a site or change how it can be reached."""
    try:
        site = await service.update_site(
            subdomain, name=request.name, routing_mode=request.routing_mode
        )
    except SiteNotFoundError as e:
        raise _not_found(e) from e
    return SiteRead.from_site(site, config)


@router.delete(
    "/{subdomain}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Site not found"}},
)
async def delete_site(subdomain: str, service: SiteServiceDep) -> Response:
    """Delete a site and its deployed files."""
    try:
        await service.delete_site(subdomain)
    except SiteNotFoundError as e:
        raise _not_found(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{subdomain}/status",
    response_model=SiteStatusResponse,
    responses={
        200: {
            "description": "Deployment status retrieved",
            "content": {
                "application/json": {
                    "examples": {
                        "deployed": {
                            "summary": "Site is live",
                            "value": {
                                "subdomain": "acme",
                                "status": "deployed",
                                "last_deployed_at": "2026-01-01T12:00:00",
                                "error": None,
                                "updated_at": "2026-01-01T12:00:00",
                            },
                        },
                        "failed": {
                            "summary": "Last deployment failed",
                            "value": {
                                "subdomain": "acme",
                                "status": "failed",
                                "last_deployed_at": None,
                                "error": "no HTML files found",
                                "updated_at": "2026-01-01T12:00:00",
                            },
                        },
                    }
                }
            },
        },
        404: {"description": "Site not found"},
    },
)
async def get_site_status(subdomain: str, service: SiteServiceDep) -> SiteStatusResponse:
    """
    Check deployment status from database.

    Returns:
    - pending: Nothing deployed yet
    - deploying: A deployment is running
    - deployed: The site is live
    - failed: The last deployment failed, see ``error``
    """
    try:
        site = await service.get_site(subdomain)
    except SiteNotFoundError as e:
        raise _not_found(e) from e
    return SiteStatusResponse.from_site(site)


@router.post(
    "/{subdomain}/deployments",
    response_model=DeploymentScheduledResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        400: {"description": "Archive is not a gzip file"},
        404: {"description": "Site not found"},
        409: {"description": "A deployment is already in progress"},
        413: {"description": "Archive exceeds the upload limit"},
    },
)
async def deploy_site(
    subdomain: str,
    service: SiteServiceDep,
    archive: UploadFile = File(..., description="Site contents as a .tar.gz archive"),
) -> DeploymentScheduledResponse:
    """
    Upload an archive and start a deployment.

    Returns immediately with the workflow ID. Poll /sites/{subdomain}/status for progress.
    """
    try:
        workflow_id = await service.schedule_deployment(subdomain, archive)
    except SiteNotFoundError as e:
        raise _not_found(e) from e
    except UploadTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(e)
        ) from e
    except InvalidUploadError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except DeploymentInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    finally:
        await archive.close()

    return DeploymentScheduledResponse(workflow_id=workflow_id, subdomain=subdomain)
