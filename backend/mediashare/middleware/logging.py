"""
MediaShare Backend — Request Logging Middleware
=================================================

What:  One access log line for every HTTP request.
How:   Measures time from middleware entry to response, then logs the
       method, the matched route template, the photo it concerns, status,
       duration and request ID. The level follows the status class:
       5xx ERROR, 4xx WARNING, otherwise INFO.

Example:
    POST /api/photos/{photo_id}/rating photo=1760816400123-9f1c2a 201 4.2ms [a1b2c3d4]
    GET /api/photos 200 12.9ms [5e6f7a8b]

Request bodies (photos, comment text) are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from mediashare.middleware.request_id import request_id_var

logger = logging.getLogger("mediashare.access")

# Probed every few seconds by load balancers; not worth a log line each.
QUIET_PATHS = {"/health"}


def _route_label(request: Request) -> str:
    """Route template plus the photo id when the route has one."""
    # The router fills "route" and "path_params" into the shared scope.
    route = request.scope.get("route")
    label = getattr(route, "path", None) or request.url.path
    photo_id = request.scope.get("path_params", {}).get("photo_id")
    if photo_id:
        label = f"{label} photo={photo_id}"
    return label


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs status and duration of each request, correlated by request ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s]",
            request.method,
            _route_label(request),
            status,
            duration_ms,
            request_id_var.get(""),
        )
        return response
