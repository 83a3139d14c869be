"""Access logging and HTTP metrics middleware."""

import time
from typing import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from irrrl_gateway.core.config import settings
from irrrl_gateway.core.metrics import record_http_request

logger = structlog.get_logger(__name__)

_SKIP_PATHS = frozenset({"/metrics", "/v1/health"})


def _endpoint_label(request: Request) -> str:
    # Route template keeps label cardinality bounded (no application IDs)
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its status and duration and records HTTP metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        path = request.url.path
        log = logger.bind(method=request.method, path=path)

        try:
            response = await call_next(request)
        except Exception as e:
            log.error(
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise

        duration = time.perf_counter() - start
        if path not in _SKIP_PATHS:
            log.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            if settings.metrics_enabled:
                record_http_request(
                    request.method,
                    _endpoint_label(request),
                    response.status_code,
                    duration,
                )

        return response
