"""
Image Tagger Backend — Request ID Middleware
==============================================

What:  Assigns a short correlation id to each request and echoes it back.
How:   Uses the client's X-Request-ID header when present, otherwise the first
       8 characters of a UUID4. The id is stored in a ContextVar (for loggers
       and exception handlers) and on request.state (for route handlers).
Who:   Applied to every request via Starlette middleware.
When:  Before request logging, so access log lines carry the id.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Sets request_id_var and adds X-Request-ID to every response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
