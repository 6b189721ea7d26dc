"""
Contact Service — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the test suite.
How:   Every test gets a fresh in-memory SQLite database (aiosqlite,
       StaticPool so all sessions share the one connection) with the
       contacts schema created. Nothing touches a real server.

Fixtures:
    ├── engine:          async engine over a fresh in-memory database
    ├── db_session:      AsyncSession bound to that engine
    ├── mock_db_session: AsyncMock session for failure injection
    ├── app:             FastAPI app with the test engine attached
    └── test_client:     HTTPX AsyncClient talking to `app` over ASGI
"""

import os

# Must be set before contact_service.config is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["COLLECTION"] = "contacts"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("DATABASE_NAME", None)
os.environ.pop("DBNAME", None)

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from contact_service.database import attach_engine, create_schema
from contact_service.main import create_app


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """
    A session on the test database.

    Service calls flush but never commit; tests commit when a later step
    has to survive a rollback.
    """
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A MagicMock simulating AsyncSession, for storage failure tests.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def app(engine):
    app = create_app()
    attach_engine(app, engine)
    return app


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the app (no server, no lifespan).

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def ada():
    return {"contact_name": "Ada", "phone_number": "555", "message": "hi"}
