"""
Contact Service — Request ID Middleware
=========================================

What:  Assigns a correlation ID to each request and returns it in the
       X-Request-ID response header.
How:   Uses the client's X-Request-ID when present, otherwise the first
       eight characters of a fresh UUID4. The ID is stored in a ContextVar
       (read by the access log and the exception handlers) and on
       request.state.
Who:   Applied to every request; added last in create_app() so it is the
       outermost of the application middlewares.
When:  Before the access log and every route handler.

Where the ID is read:
    - RequestLoggingMiddleware: the access-log line
    - main.register_exception_handlers: the `request_id` of error bodies
    - the catch-all 500 handler: request.state.request_id, since Starlette
      runs that handler outside this middleware's context

    Every JSON error body carries the same value as the response header, so
    a client report can be matched to the server's log lines.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# ── Context Variable ──────────────────────────────────────────────────────
# Coroutine-local: concurrent requests on one event loop each see their own ID.
# Empty outside a request (startup logs, tests calling services directly).
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns a unique ID to each request for tracing.

    Behavior:
        1. Take X-Request-ID from the request headers when it is non-empty
        2. Otherwise generate an 8-character ID
        3. Store it in request_id_var and request.state.request_id
        4. Echo it in the X-Request-ID response header
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # An empty header counts as absent
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
