"""
Contact Service — Request Logging Middleware
==============================================

What:  One access-log line per HTTP request.
How:   Measures the time spent downstream and logs method, path, status,
       duration, request ID and client address. Level follows the status
       class: 5xx → ERROR, 4xx → WARNING, otherwise INFO.
Who:   Applied to every request, inside RequestIDMiddleware.
When:  After the response has been produced by the route or an exception
       handler.

Log line:
    POST /contacts 201 3.2ms [1f3a9c2e] from 127.0.0.1

    The same values are attached as `extra` fields (request_id, method,
    path, status, duration_ms, client_ip) for handlers that emit records
    as structured data.

What is logged vs what is not:
    Logged: method, path, status, duration, client IP, request ID
    Not logged: request bodies and headers

    GET /health is not logged at all.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from contact_service.middleware.request_id import request_id_var

logger = logging.getLogger("contact_service.access")

# Paths served without an access-log line
_SILENT_PATHS = frozenset({"/health"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration of each request.

    Duration covers everything downstream: validation, the service call,
    the SQL statement and serialization of the response.

    The logger name is "contact_service.access"; its level follows
    LOG_LEVEL through setup_logging().
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in _SILENT_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

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
