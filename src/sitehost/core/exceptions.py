"""Site management errors and the handlers that render API errors with request_id."""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.sitehost.core.logging import get_logger

logger = get_logger(__name__)


class SiteError(Exception):
    """Base class for site management errors raised by the service layer."""


class SiteNotFoundError(SiteError):
    """No site exists for the given id or subdomain."""


class SiteAlreadyExistsError(SiteError):
    """A site with the requested subdomain already exists."""


class DeploymentInProgressError(SiteError):
    """A deployment for the site is already running."""


class InvalidUploadError(SiteError):
    """The uploaded archive was rejected before scheduling a deployment."""


class UploadTooLargeError(InvalidUploadError):
    """The uploaded archive exceeds the configured size limit."""


def error_response(status_code: int, detail: object) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "request_id": correlation_id.get()},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses.

    Site file responses never reach these handlers: the routing middleware
    answers them, including its own HTML 404 page.
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error_response(exc.status_code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return error_response(422, jsonable_encoder(exc.errors()))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=correlation_id.get(),
            path=request.url.path,
        )
        return error_response(500, "Internal server error")
