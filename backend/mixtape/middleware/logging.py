"""
Mixtape Backend — Request Logging Middleware
=============================================

What:  One access line per request on the `mixtape.access` logger.
How:   After the response is produced, looks up the matched route template
       (`/api/user/{user_id}` rather than the concrete URL) and logs it with
       the status, elapsed time and request ID.
When:  After RequestIDMiddleware, so the request ID is available.

Never logged: request bodies (passwords travel in signup/update bodies).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from mixtape.middleware.request_id import request_id_var

logger = logging.getLogger("mixtape.access")

# Probes hit these every few seconds
QUIET_PATHS = {"/health"}


def route_template(request: Request) -> str:
    """Path pattern of the matched route; the raw path when nothing matched."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log keyed by route template."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        route = route_template(request)
        rid = request_id_var.get("")
        logger.log(
            level_for_status(response.status_code),
            "Req was made: %s %s -> %d (%.1fms) [%s]",
            request.method,
            route,
            response.status_code,
            elapsed_ms,
            rid,
            extra={
                "request_id": rid,
                "route": route,
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
            },
        )
        return response
