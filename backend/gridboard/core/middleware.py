"""Request middleware — request ids, access logging, and HTTP metrics.

A caller-supplied X-Request-ID is reused so a browser session can correlate
its own logs with ours. Probe and scrape paths are counted but not logged.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from gridboard.core.metrics import http_request_duration_seconds, http_requests_total

REQUEST_ID_HEADER = "X-Request-ID"
_QUIET_PATHS = frozenset({"/health", "/health/live", "/health/ready", "/metrics"})
_MAX_REQUEST_ID_LENGTH = 128

logger = structlog.stdlib.get_logger("gridboard.http")


def _request_id(request: Request) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if incoming and len(incoming) <= _MAX_REQUEST_ID_LENGTH:
        return incoming
    return uuid.uuid4().hex


def _route_path(request: Request) -> str:
    # Label by route pattern; resolved paths carry widget and source ids.
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _request_id(request)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id, method=request.method, path=request.url.path
        )
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request_failed")
            http_requests_total.labels(
                method=request.method, path=_route_path(request), status=500
            ).inc()
            structlog.contextvars.clear_contextvars()
            raise

        duration = time.perf_counter() - start
        path = _route_path(request)

        http_requests_total.labels(
            method=request.method, path=path, status=response.status_code
        ).inc()
        http_request_duration_seconds.labels(method=request.method, path=path).observe(duration)
        response.headers[REQUEST_ID_HEADER] = request_id

        if path not in _QUIET_PATHS:
            log = logger.warning if response.status_code >= 500 else logger.info
            log(
                "request_completed",
                route=path,
                status=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )

        structlog.contextvars.clear_contextvars()
        return response
