"""
Contact Service — Health Check Route
======================================

What:  GET /health for container health checks and load balancers.
How:   Runs SELECT 1 on the application's engine and reports uptime.

Status levels:
    - healthy:   database reachable
    - unhealthy: database unreachable (the contacts routes would return 500)
"""

import logging
import time

from fastapi import APIRouter, Request
from sqlalchemy import text

from contact_service import __version__
from contact_service.database import get_engine
from contact_service.schemas.contact import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    engine = get_engine(request.app)
    try:
        if engine is None:
            raise RuntimeError("database engine not initialized")
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
