"""
Team Cook API: Request Logging Middleware
===========================================

What:  One access-log line per request with status, duration and cache outcome.
How:   Times the downstream call and picks the level from the final status
       (see `level_for_status`). Chain 404s and upstream 4xx passed through
       are warnings; anything the proxy could not answer is an error.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Example line:
    GET /api/1/recipes/42/information 200 3.1ms cache=HIT [a1b2c3d4] from 10.0.0.7

Not logged: query strings (they may carry user search terms) or headers.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from teamcook_api.middleware.request_id import request_id_var

logger = logging.getLogger("teamcook_api.access")

# Polled by health checks every few seconds
SILENT_PATHS = frozenset({"/api/status"})

# Shown when the response did not go through the cache handler
NO_CACHE_OUTCOME = "-"


def level_for_status(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SILENT_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        fields = {
            "request_id": request_id_var.get(""),
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
            "cache": response.headers.get("X-Cache", NO_CACHE_OUTCOME),
            "client_ip": request.client.host if request.client else "unknown",
        }
        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms cache=%s [%s] from %s",
            fields["method"],
            fields["path"],
            fields["status"],
            elapsed_ms,
            fields["cache"],
            fields["request_id"],
            fields["client_ip"],
            extra=fields,
        )
        return response
