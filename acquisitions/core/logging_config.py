"""Process-wide logging setup and the HTTP access-log middleware."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from acquisitions.core.config import Settings

access_logger = logging.getLogger("acquisitions.access")


def configure_logging(settings: Settings) -> None:
    """Configure the root logger once at startup using LOG_LEVEL."""
    # Timestamps are rendered in UTC to match the trailing Z in datefmt
    logging.Formatter.converter = time.gmtime
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    # SQL echo is controlled by DEBUG on the engine, keep the library quiet otherwise
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log one line per request: method, path, status and duration."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            client = request.client.host if request.client else "-"
            access_logger.info(
                "%s %s %s %s %.1fms",
                client,
                request.method,
                request.url.path,
                status_code,
                duration_ms,
            )
