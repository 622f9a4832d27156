"""
Image Tagger Backend — Request Logging Middleware
==================================================

What:  One access log line per request: method, path, status, duration,
       request id and client address.
How:   Measures wall time around call_next; picks the log level from the
       status class (5xx → ERROR, 4xx → WARNING, else INFO).
Who:   Applied to every request via Starlette middleware.
When:  After RequestIDMiddleware, so the request id is already set.

Never logged: request bodies (comments are user content) and the identity
header value.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from tagger.middleware.request_id import request_id_var

logger = logging.getLogger("tagger.access")

# Polled by monitors; logging them would drown real traffic
QUIET_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    """Log level for a response status code."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        rid = request_id_var.get("")

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
