"""
NeuroNotes Backend: Request ID Middleware
===========================================

What:  Assigns a correlation ID to each request and echoes it back in the
       X-Request-ID response header.
How:   Reuses a client-supplied X-Request-ID when present, otherwise
       generates a short UUID. The ID is stored in a ContextVar (read by
       loggers and exception handlers) and in request.state (read by routes).
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to the context, request state and response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = rid
        return response
