"""
Contact Service — Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract of the contacts routes.
How:   FastAPI validates request bodies against ContactPayload and serializes
       responses through ContactResponse / MessageResponse.

Partial payloads:
    Every field of ContactPayload is optional. Which fields the client
    actually sent is read from `model_fields_set`: that set drives the PUT
    merge (a sent field overrides, even when it is null or an empty string;
    an unsent field keeps its stored value). The empty-body check also
    counts unknown keys, so only `{}` or no body at all is "empty".
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ContactPayload(BaseModel):
    """
    Body of POST /contacts and PUT /contacts/{name}.

    What:  The four contact fields, each optional.
    How:   Keys other than the four fields are kept in `model_extra`. They
           count toward the non-empty check but are never stored. Numbers
           are accepted for any field and stored as their string form;
           objects and arrays are rejected (→ 400).
    """

    contact_name: Optional[str] = Field(default=None, description="Unique contact name")
    phone_number: Optional[str] = Field(default=None, description="Phone number")
    message: Optional[str] = Field(default=None, description="Free-form message")
    image_url: Optional[str] = Field(default=None, description="Avatar or photo URL")

    model_config = {"extra": "allow", "coerce_numbers_to_str": True}

    def is_empty(self) -> bool:
        """True when the request body was an object with zero keys."""
        return not (self.model_fields_set or self.model_extra)

    def provided_fields(self) -> Dict[str, Any]:
        """Only the contact fields present in the request body, with their values."""
        known = self.model_fields_set & set(type(self).model_fields)
        return self.model_dump(include=known)

    def contact_fields(self) -> Dict[str, Any]:
        """All four contact fields; the ones not sent are None."""
        return self.model_dump(include=set(type(self).model_fields))


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ContactResponse(BaseModel):
    """
    A stored contact as returned by GET. The storage id is not part of the
    contract. Fields that were never set come back as null.
    """

    contact_name: Optional[str] = None
    phone_number: Optional[str] = None
    message: Optional[str] = None
    image_url: Optional[str] = None

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    """Body of every write response and of every error response."""

    message: str = Field(description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """
    Error body returned by the exception handlers.

    Example:
        {
            "message": "Contact with name 'Ada' already exists.",
            "request_id": "1f3a9c2e"
        }
    """

    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Validation details, 400 only")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response: service and database status."""

    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
