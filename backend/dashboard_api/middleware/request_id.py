"""
Dashboard API — Request ID Middleware
======================================

What:  Tags every request with a short correlation id.
Why:   Error bodies carry the id as "request_id", so an operator can find the
       server-side log line (with the store error details) behind a generic
       "Failed to fetch resource" seen in the dashboard.
How:   Reuses an incoming X-Request-ID header when the caller sends one,
       otherwise generates 8 hex characters. The id is published through a
       ContextVar for handlers and loggers, and echoed in the response.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Sets request_id_var and request.state.request_id; adds X-Request-ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
