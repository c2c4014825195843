"""
Dashboard API — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the resource API.
Why:   Each exception maps to one HTTP status code and one client-safe
       message; global handlers in main.py turn them into JSON responses.
How:   Each exception class carries a message and optional context dict.
       The message is returned to the client, the context is only logged.

Exception Hierarchy:
    DashboardError (base)
    ├── ValidationError          → 400 Bad Request (malformed id, bad payload)
    ├── UnknownResourceError     → 404 Not Found (resource key not whitelisted)
    ├── NotFoundError            → 404 Not Found (row does not exist)
    └── DatabaseError            → 500 Internal Server Error (store failure)

Response body shape (all handlers):
    {"error": "<message>", "code": "<machine code>", "request_id": "<id>"}
"""

from typing import Any, Dict, Optional


class DashboardError(Exception):
    """
    Base exception for all Dashboard API errors.

    Attributes:
        message:  Client-facing error description (safe to return)
        context:  Additional debug info (logged but NOT returned to client)
    """

    code = "server_error"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(DashboardError):
    """
    Raised when client input can be rejected before touching the store.

    When:    Malformed identifier, non-object JSON body, a value that cannot
             be adapted to its column type.
    HTTP:    400 Bad Request
    """

    code = "validation_error"
    status_code = 400

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


class UnknownResourceError(DashboardError):
    """
    Raised when a path names a resource that is not in the whitelist.

    Checked before any session is used, so the store is never touched.
    HTTP:    404 Not Found
    """

    code = "unknown_resource"
    status_code = 404

    def __init__(self, resource: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["resource"] = resource
        super().__init__(message=f"Unknown resource: {resource}", context=ctx)
        self.resource = resource


class NotFoundError(DashboardError):
    """
    Raised when a row addressed by id does not exist.

    SQLAlchemy returns None for missing rows; the service layer converts
    that None into this exception so routes stay free of status logic.
    HTTP:    404 Not Found
    """

    code = "not_found"
    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message="Resource not found", context=ctx)


class DatabaseError(DashboardError):
    """
    Raised when a store operation fails unexpectedly.

    The message is always one of the generic per-operation messages
    ("Failed to fetch resource", ...). Driver errors, SQL text and
    constraint names stay in the context and the server log.
    HTTP:    500 Internal Server Error
    """

    code = "server_error"
    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
