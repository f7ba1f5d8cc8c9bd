"""
Portfolio Backend — Custom Exception Hierarchy
================================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and repositories; caught by global handlers.
When:  During request processing when recoverable errors occur.

Exception Hierarchy:
    PortfolioError (base)
    ├── ValidationError              → 400 Bad Request (client can fix)
    ├── AuthenticationError          → 401 Unauthorized
    │   ├── MissingCredentialError
    │   └── InvalidCredentialError
    ├── NotFoundError                → 404 Not Found
    └── DatabaseError                → 500 Internal Server Error
"""

from typing import Any, Dict, List, Optional


class PortfolioError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


def violation(field: str, message: str) -> Dict[str, str]:
    """Build a single `{field, message}` violation record."""
    return {"field": field, "message": message}


class ValidationError(PortfolioError):
    """
    Raised when client input fails validation.

    What:    The request carried malformed or out-of-bounds fields, a malformed
             project id, an unsupported image, or an unreadable body.
    HTTP:    400 Bad Request

    The full list of violations travels with the exception so the client sees
    every problem in one response:

        {
            "error": "validation_error",
            "message": "Validation error",
            "errors": [
                {"field": "title", "message": "title must be between 2 and 120 characters"},
                {"field": "image", "message": "Invalid image format (JPEG/PNG/WebP)"}
            ]
        }
    """

    def __init__(
        self,
        errors: Optional[List[Dict[str, str]]] = None,
        message: str = "Validation error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors = list(errors or [])

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(errors=[violation(field, message)])


class AuthenticationError(PortfolioError):
    """
    Raised when a mutating request lacks a usable bearer credential.

    HTTP:    401 Unauthorized
    The message is deliberately generic; verifier details stay in the logs.
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MissingCredentialError(AuthenticationError):
    """No `Authorization: Bearer <token>` header was sent."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Missing bearer token", context=context)


class InvalidCredentialError(AuthenticationError):
    """The token was present but failed verification (expired, malformed, bad signature)."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid or expired token", context=context)


class NotFoundError(PortfolioError):
    """
    Raised when a requested resource does not exist.

    What:    A well-formed id matched no record.
    When:    GET/PUT/DELETE /api/projects/{id} for a missing project.
    HTTP:    404 Not Found
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


class DatabaseError(PortfolioError):
    """
    Raised when database operations fail unexpectedly.

    What:    A query, insert, update or delete failed.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Detailed error info (SQL, constraint names) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
