"""
Contact Service — Application Package Initializer
==================================================

What:  Marks the `contact_service` directory as a Python package.
Who:   Imported by uvicorn (`contact_service.main:app`), Alembic and pytest.

Architecture Note:
    The service is one small layered FastAPI application:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     ContactService (operations)     │  ← one statement per call
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← app-owned async engine
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
