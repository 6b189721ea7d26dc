"""
Contact Service — Static Routes
=================================

What:  GET / (liveness text) and GET /name (configured text).
How:   Plain-text responses; neither route touches storage.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from contact_service.config import settings

router = APIRouter(tags=["Root"])


@router.get("/", response_class=PlainTextResponse, summary="Liveness text")
async def root() -> str:
    return "Backend is running!"


@router.get("/name", response_class=PlainTextResponse, summary="Configured name text")
async def name() -> str:
    return settings.name_message
