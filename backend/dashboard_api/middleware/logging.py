"""
Dashboard API — Request Logging Middleware
===========================================

What:  One access-log line per request: method, path + query, status,
       duration and request id.
Why:   Dashboard tables fire a request on every click; the query string is
       what tells which page, sort and filter a slow or failing call used.
How:   Wraps call_next with a perf_counter timer. The level follows the
       status class: 5xx → ERROR, 4xx → WARNING, otherwise INFO.

Not logged:
    Request and response bodies (user records contain phone numbers and
    other personal data). /health probes are skipped entirely.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from dashboard_api.middleware.request_id import request_id_var

logger = logging.getLogger("dashboard_api.access")

QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access logging under the "dashboard_api.access" logger."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        target = f"{path}?{request.url.query}" if request.url.query else path
        rid = request_id_var.get("")
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s]",
            request.method,
            target,
            status,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
