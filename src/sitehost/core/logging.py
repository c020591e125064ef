"""Logging configuration using structlog."""

import logging
import sys

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

# Library loggers held above the application level
LIBRARY_LOG_LEVELS: dict[str, int] = {
    "sqlalchemy.engine": logging.WARNING,
    "temporalio": logging.INFO,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}


def _renderer(debug: bool) -> structlog.typing.Processor:
    if debug:
        return structlog.dev.ConsoleRenderer(colors=True)
    return structlog.processors.JSONRenderer()


def setup_logging(debug: bool = False, access_log: bool = True) -> None:
    """Configure structlog for structured logging.

    Args:
        debug: Colored console output at DEBUG level. Otherwise JSON lines at INFO.
        access_log: Keep uvicorn's per-request access log. Every served site
            file is a request, so busy hosts may turn it off.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if not debug:
        processors.append(structlog.processors.dict_tracebacks)
    processors.append(_renderer(debug))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name, level in LIBRARY_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(level)
    if not access_log:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None, host: str | None = None) -> None:
    """Bind request-level context to all subsequent log calls.

    Args:
        request_id: The correlation ID for the current request.
        host: The Host header, which decides the site a request may reach.
    """
    if request_id:
        bind_contextvars(request_id=request_id)
    if host:
        bind_contextvars(host=host)


def bind_site_context(subdomain: str, routing_method: str) -> None:
    """Bind the site being served to all subsequent log calls.

    Args:
        subdomain: Subdomain of the matched site.
        routing_method: How the request reached the site ("subdomain" or "subpath").
    """
    bind_contextvars(site=subdomain, routing_method=routing_method)


def clear_request_context() -> None:
    clear_contextvars()
