"""
Contact Service — Database Engine & Session Management
========================================================

What:  Async SQLAlchemy engine construction, session factory, and the
       FastAPI session dependency.
How:   The app factory builds ONE engine during startup and stores it, with
       its session factory, on `app.state`. Route handlers receive a session
       per request through `get_db_session`, which reads the factory from the
       running application. Nothing here is a module-level connection.
Who:   Used by main.lifespan (create / dispose), route handlers (Depends),
       and tests (which attach an in-memory engine through `attach_engine`).
"""

import logging
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from contact_service.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models; owns the shared metadata."""
    pass


# ── Engine Construction ───────────────────────────────────────────────────
def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Build the async engine for the configured database.

    pool_pre_ping validates pooled connections before use so a restarted
    database does not surface as a failed request. Pool sizing is left at
    the driver defaults.
    """
    return create_async_engine(
        settings.sqlalchemy_url,
        pool_pre_ping=True,
        echo=settings.log_level == "DEBUG",
    )


def attach_engine(app: FastAPI, engine: AsyncEngine) -> None:
    """Make `engine` the storage handle used by every request of `app`."""
    app.state.engine = engine
    app.state.session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


def get_engine(app: FastAPI) -> Optional[AsyncEngine]:
    return getattr(app.state, "engine", None)


async def create_schema(engine: AsyncEngine) -> None:
    """
    Create the contacts table and its unique index if they do not exist.

    Equivalent to Alembic revision 001; used for zero-setup deployments and
    tests. Importing the model registers it with Base.metadata.
    """
    from contact_service.models.contact import Contact  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the factory attached to the running app
        2. Yields it to the route handler
        3. On success: commits
        4. On error: rolls back and re-raises for the exception handlers
        5. Always: closes the session (returns the connection to the pool)

    Example usage in a route:
        @router.get("/contacts")
        async def list_contacts(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine(engine: AsyncEngine) -> None:
    """Close all pooled connections. Called during application shutdown."""
    await engine.dispose()
    logger.info("Database engine disposed")
