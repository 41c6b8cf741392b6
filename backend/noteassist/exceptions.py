"""
NoteAssist Backend — Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    NoteAssistError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── UnauthorizedError        → 401 Unauthorized (no caller identity)
    ├── NotFoundError            → 404 Not Found (missing OR not owned)
    ├── ProviderError            → 503 Service Unavailable
    │   └── ProviderBlockedError → 503 Service Unavailable (safety filter)
    ├── ConfigurationError       → 500 Internal Server Error
    └── DatabaseError            → 500 Internal Server Error

The `context` dict is for server-side logs only. Handlers for 5xx errors
never copy it into the response body.
"""

from typing import Any, Dict, Optional


class NoteAssistError(Exception):
    """
    Base exception for all NoteAssist application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for 4xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NoteAssistError):
    """
    Raised when client input fails a business rule.

    Schema-level problems (wrong types, missing fields, title length) are
    caught earlier by FastAPI and mapped to the same 400 response shape.

    Example response:
        {
            "error": "validation_error",
            "message": "Content must not be empty",
            "details": {"field": "content"}
        }
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


class UnauthorizedError(NoteAssistError):
    """
    Raised when a note-scoped request arrives without a caller identity.

    The identity header is set by the upstream auth gateway; its absence
    means the request bypassed the gateway or the session is invalid.
    HTTP: 401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NoteAssistError):
    """
    Raised when a requested resource does not exist for the caller.

    "Does not exist" and "exists but belongs to someone else" both raise this
    exception with the same message, so responses never reveal whether
    another user's note id is valid.
    HTTP: 404 Not Found
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


class ProviderError(NoteAssistError):
    """
    Raised when the generative-AI provider fails.

    What:    The Gemini call raised, or returned no usable text.
    When:    On the single attempt made per request (there are no retries).
    HTTP:    503 Service Unavailable
    """

    def __init__(
        self,
        message: str = "The AI service is temporarily unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ProviderBlockedError(ProviderError):
    """
    Raised when the provider's safety filters blocked the prompt or reply.

    Kept distinct from ProviderError because the user can act on it:
    rephrasing or shortening the content usually gets past the filter.
    """

    def __init__(
        self,
        message: str = (
            "Response was blocked by safety filters. "
            "Try rephrasing or shortening the content."
        ),
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(NoteAssistError):
    """
    Raised when a required setting is missing at first use.

    Example: an AI-assist request arrives but GEMINI_API_KEY was never set.
    HTTP: 500 Internal Server Error (generic message, details logged)
    """

    def __init__(
        self,
        message: str = "The server is not configured correctly.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(NoteAssistError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the SQL error
    and constraint names are only logged.
    HTTP: 500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
