"""Logging middleware and configuration."""

import logging
import sys
import time
import uuid
from collections.abc import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from structlog.types import Processor

from app.config import settings

REQUEST_ID_HEADER = "X-Request-ID"

# Scraped every few seconds; logging them drowns the scheduling events
QUIET_PATHS = frozenset({"/metrics"})


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(level: str | None = None, log_format: str | None = None) -> None:
    """
    Configure structlog for the service.

    Args:
        level: Log level name, ``LOG_LEVEL`` when omitted
        log_format: ``json`` or ``console``, ``LOG_FORMAT`` when omitted
    """
    level = (level or settings.log_level).upper()
    log_format = log_format or settings.log_format

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            _renderer(log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=getattr(logging, level))


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Tag every log line of a request with its id and log the outcome.

    The id comes from the ``X-Request-ID`` header when the caller sends one
    and is echoed back, so rejected bookings can be traced to a client call.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        logger = structlog.get_logger()
        quiet = request.url.path in QUIET_PATHS
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        duration = time.perf_counter() - start_time
        if not quiet:
            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )

        response.headers["X-Process-Time"] = str(duration)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
