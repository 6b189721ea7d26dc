"""
Contact Service — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, exception handlers and routers;
       the lifespan owns the database engine for the life of the process.
Who:   uvicorn (`uvicorn contact_service.main:app`), the `contact-service`
       console script (run()), and the test suite.

Application Layout:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:  GET /  GET /name  /contacts…  GET /health │
    │                                                     │
    │  Exception Handlers:                                │
    │   Validation→400  NotFound→404  Conflict→409        │
    │   Database→500    anything else→500                 │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → engine (unless one is already attached) → schema
    Shutdown: dispose the engine the lifespan created
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from contact_service import __version__
from contact_service.config import settings
from contact_service.database import (
    attach_engine,
    create_engine_from_settings,
    create_schema,
    dispose_engine,
    get_engine,
)
from contact_service.exceptions import (
    ContactServiceError,
    DatabaseError,
    ValidationError,
)
from contact_service.middleware.logging import RequestLoggingMiddleware
from contact_service.middleware.request_id import RequestIDMiddleware, request_id_var
from contact_service.routes import contacts, health, root

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, before anything else logs.

    Format: 2024-01-15T12:00:00 [INFO] contact_service.services.contact_service: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # uvicorn's access log duplicates RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Own the storage handle for the life of the process.

    The engine is created once here and shared by every request through
    get_db_session. An engine attached before startup (tests) is used as is
    and left for its owner to dispose.
    """
    setup_logging()
    logger.info("Contact Service starting up...")

    owned_engine = None
    if get_engine(app) is None:
        owned_engine = create_engine_from_settings(settings)
        attach_engine(app, owned_engine)
        logger.info(
            "Database: %s (collection '%s')",
            settings.sqlalchemy_url.render_as_string(hide_password=True),
            settings.contacts_collection,
        )

    if settings.db_create_schema:
        try:
            await create_schema(get_engine(app))
        except Exception as e:
            # Keep serving; contact routes report 500 until the database is back
            logger.error("Could not create contacts schema: %s", str(e))

    logger.info("Server listening on http://%s:%d", settings.host, settings.port)

    yield

    logger.info("Contact Service shutting down...")
    if owned_engine is not None:
        await dispose_engine(owned_engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to HTTP responses.

    Handler hierarchy:
        RequestValidationError  → 400 (malformed JSON, wrong field types)
        ValidationError         → 400
        DatabaseError           → 500 (logged with context)
        ContactServiceError     → exc.status_code (404, 409)
        Exception (fallback)    → 500 generic message
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        errors = jsonable_encoder(exc.errors())
        detail = errors[0].get("msg", "Invalid request body") if errors else "Invalid request body"
        logger.warning("[%s] Request validation failed: %s", rid, detail)
        return JSONResponse(
            status_code=400,
            content={
                "message": f"Bad request: {detail}",
                "details": errors,
                "request_id": rid,
            },
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "message": exc.message,
                "details": exc.context or None,
                "request_id": rid,
            },
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, "request_id": rid},
        )

    @app.exception_handler(ContactServiceError)
    async def handle_service_error(request: Request, exc: ContactServiceError):
        rid = request_id_var.get("")
        logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, "request_id": rid},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Starlette runs this handler outside the middleware stack: the
        # ContextVar is unset here and the response bypasses RequestIDMiddleware.
        rid = request_id_var.get("") or getattr(request.state, "request_id", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": rid,
            },
            headers={"X-Request-ID": rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Middleware executes in reverse order of addition, so the effective
    order is RequestID → Logging → CORS.
    """
    app = FastAPI(
        title="Contact Service API",
        description="CRUD API over a single contacts collection, keyed by contact name.",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(root.router)
    app.include_router(contacts.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Serve the application on HOST:PORT (console script entry point)."""
    uvicorn.run(
        "contact_service.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
