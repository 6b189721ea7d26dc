"""
Contact Service — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the four failure kinds of the API.
How:   Each exception carries a client-facing message and an optional context
       dict. ContactService raises them; the handlers registered in
       main.register_exception_handlers turn them into JSON responses with
       the matching HTTP status. Routes never look at driver exceptions.

Exception Hierarchy:
    ContactServiceError (base)
    ├── ValidationError   → 400 Bad Request
    ├── NotFoundError     → 404 Not Found
    ├── ConflictError     → 409 Conflict
    └── DatabaseError     → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class ContactServiceError(Exception):
    """
    Base exception for all Contact Service errors.

    Attributes:
        message:  User-facing error description (returned in the API response)
        context:  Additional debug info (logged, not returned)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ContactServiceError):
    """
    Raised when the request body is missing, empty, or malformed.

    HTTP: 400 Bad Request. Also used for FastAPI's own request validation
    failures so that every client input error shares one status.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Bad request: No data provided.",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(ContactServiceError):
    """
    Raised when no contact matches the requested name.

    HTTP: 404 Not Found. The message differs per route (GET says
    "Contact not found", PUT/DELETE name the missing contact), so callers
    pass it explicitly; `contact_name` is kept in the context.
    """

    status_code = 404

    def __init__(
        self,
        message: str = "Contact not found",
        contact_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["contact_name"] = contact_name
        super().__init__(message=message, context=ctx)
        self.contact_name = contact_name


class ConflictError(ContactServiceError):
    """
    Raised when a write would create a second contact with an existing name.

    HTTP: 409 Conflict. Produced from the unique index violation, so it is
    reported even when two identical creates race.
    """

    status_code = 409

    def __init__(
        self,
        contact_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"Contact with name '{contact_name}' already exists."
        ctx = context or {}
        ctx["contact_name"] = contact_name
        super().__init__(message=message, context=ctx)
        self.contact_name = contact_name


class DatabaseError(ContactServiceError):
    """
    Raised when a storage statement fails for any reason other than a
    uniqueness violation.

    HTTP: 500 Internal Server Error. Write routes append the driver's error
    text to the message ("Failed to add contact: ..."); the read routes use
    a fixed message.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
