"""
Notekeep Backend: Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the two error kinds the API exposes.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return the fixed JSON shapes with the matching HTTP status codes.
Who:   Raised by store adapters and services; caught by global handlers.

Exception Hierarchy:
    NotekeepError (base)
    ├── NotFoundError                → 404 {"message": "Note not found"}
    ├── OperationFailedError         → 400 {"status": "fail"}
    │   ├── NoteValidationError      (field contract violated)
    │   ├── InvalidIdentifierError   (id is not a UUID)
    │   └── StoreError               (driver/database failure)
    └── StoreConnectionError         (startup could not reach the store)

The `context` dict is logged server-side and never returned to the client.
"""

from typing import Any, Dict, Optional


class NotekeepError(Exception):
    """
    Base exception for all Notekeep application errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged, NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(NotekeepError):
    """
    Raised when a single-resource lookup misses.

    When:    GET/PATCH/DELETE /notes/{id} for an id the store does not hold.
    HTTP:    404 Not Found

    The store returns None for missing records; the service layer converts
    that None into this exception.
    """

    def __init__(
        self,
        resource: str = "note",
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
        self.resource = resource
        self.resource_id = resource_id


class OperationFailedError(NotekeepError):
    """
    Raised for any non-not-found failure of a note operation.

    HTTP:    400 Bad Request with the generic {"status": "fail"} body.
    """

    def __init__(
        self,
        message: str = "The operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NoteValidationError(OperationFailedError):
    """Raised when a note (or a merged update) violates the field contract."""

    def __init__(
        self,
        message: str = "Note validation failed",
        errors: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if errors:
            ctx["errors"] = errors
        super().__init__(message=message, context=ctx)
        self.errors = errors or []


class InvalidIdentifierError(OperationFailedError):
    """Raised when a note id cannot be parsed as a UUID."""

    def __init__(self, raw_id: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["raw_id"] = raw_id
        super().__init__(message=f"'{raw_id}' is not a valid note id", context=ctx)
        self.raw_id = raw_id


class StoreError(OperationFailedError):
    """
    Raised when the database rejects or fails a store call.

    The driver error is kept in `context` for the server log; the client
    only ever sees the generic fail body.
    """

    def __init__(
        self,
        message: str = "A store operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreConnectionError(NotekeepError):
    """
    Raised when the store cannot be reached during startup.

    Not mapped to an HTTP response: the lifespan lets it propagate so the
    server process exits instead of serving traffic.
    """

    def __init__(
        self,
        message: str = "Could not connect to the note store",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
