"""
Mixtape Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the service layer.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    MixtapeError (base)
    ├── ValidationError  → 400 Bad Request (client can fix)
    ├── NotFoundError    → 404 Not Found
    ├── ConflictError    → 409 Conflict (unique constraint hit)
    └── DatabaseError    → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class MixtapeError(Exception):
    """
    Base exception for all Mixtape application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the handler allows)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MixtapeError):
    """
    Raised when client input fails a business rule.

    Schema-level problems (wrong types, missing fields) are rejected by
    FastAPI with 422 before reaching a service; this covers the rest,
    e.g. an update request that sets no fields.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(MixtapeError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that into
    this exception wherever absence is an error (update, remove,
    find-or-throw reads). Plain lookups return None instead.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(MixtapeError):
    """
    Raised when a write violates a uniqueness constraint.

    When: signup or update with an email/username that is already taken.
    HTTP: 409 Conflict
    """

    def __init__(
        self,
        message: str = "A record with the same unique fields already exists",
        fields: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = fields
        super().__init__(message=message, context=ctx)
        self.fields = fields or []


class DatabaseError(MixtapeError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic. Driver errors,
    SQL, and constraint names are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
