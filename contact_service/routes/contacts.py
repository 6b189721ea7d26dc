"""
Contact Service — Contacts Route Handlers
===========================================

What:  The /contacts resource: list, read, create, update, delete.
How:   Each handler validates the body (where there is one), hands the
       request's session to ContactService and wraps the outcome in a
       response model. Failures are exceptions rendered by the global
       handlers in main.py.

Routes:
    GET    /contacts          → 200 [Contact]         (at most 100)
    GET    /contacts/{name}   → 200 Contact           | 404
    POST   /contacts          → 201 {message}         | 400, 409
    PUT    /contacts/{name}   → 200 {message}         | 400, 404, 409
    DELETE /contacts/{name}   → 200 {message}         | 404
    Any storage failure       → 500 {message}
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from contact_service.database import get_db_session
from contact_service.exceptions import ValidationError
from contact_service.schemas.contact import (
    ContactPayload,
    ContactResponse,
    ErrorResponse,
    MessageResponse,
)
from contact_service.services.contact_service import contact_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts", tags=["Contacts"])


def _require_payload(payload: Optional[ContactPayload]) -> ContactPayload:
    """Reject a missing body or a JSON object with no keys at all."""
    if payload is None or payload.is_empty():
        raise ValidationError(message="Bad request: No data provided.")
    return payload


@router.get(
    "",
    response_model=List[ContactResponse],
    responses={500: {"description": "Storage failure", "model": ErrorResponse}},
    summary="List contacts",
    description="Returns up to 100 contacts in storage order. No pagination.",
)
async def list_contacts(
    db: AsyncSession = Depends(get_db_session),
) -> List[ContactResponse]:
    return await contact_service.list_contacts(db)


@router.get(
    "/{name}",
    response_model=ContactResponse,
    responses={
        404: {"description": "No contact with this name", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Get a contact by name",
)
async def get_contact(
    name: str,
    db: AsyncSession = Depends(get_db_session),
) -> ContactResponse:
    """The name is matched exactly: no trimming, no case folding."""
    return await contact_service.get_contact(db, name)


@router.post(
    "",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Empty or malformed body", "model": ErrorResponse},
        409: {"description": "Name already taken", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Create a contact",
)
async def create_contact(
    payload: Optional[ContactPayload] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """
    Create a contact from any non-empty subset of the four fields.

    The response does not echo the stored document.
    """
    payload = _require_payload(payload)
    await contact_service.create_contact(db, payload)
    return MessageResponse(message="New contact added successfully")


@router.delete(
    "/{name}",
    response_model=MessageResponse,
    responses={
        404: {"description": "No contact with this name", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Delete a contact by name",
)
async def delete_contact(
    name: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await contact_service.delete_contact(db, name)
    return MessageResponse(message=f"Contact {name} was DELETED successfully.")


@router.put(
    "/{name}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Empty or malformed body", "model": ErrorResponse},
        404: {"description": "No contact with this name", "model": ErrorResponse},
        409: {"description": "New name already taken", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Partially update a contact",
)
async def update_contact(
    name: str,
    payload: Optional[ContactPayload] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """
    Update the contact currently named `name`.

    Fields absent from the body keep their stored values. Sending
    `contact_name` renames the contact; the message still names the
    original. A null or empty `contact_name` is rejected with 400.
    """
    payload = _require_payload(payload)
    await contact_service.update_contact(db, name, payload)
    return MessageResponse(message=f"Contact '{name}' was UPDATED successfully.")
