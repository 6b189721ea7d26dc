# Middleware package init
"""
Contact Service — Middleware Package
======================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    Request ID runs first so the access log line and every handler log
    can carry the same correlation ID; the ID is echoed in X-Request-ID.
"""
