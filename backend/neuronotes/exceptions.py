"""
NeuroNotes Backend: Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for each error scenario.
How:   Each exception carries a user-facing message, an optional context dict
       (logged, never returned) and the HTTP status it maps to. Global
       handlers in main.py turn them into JSON error responses; the AI
       function routes build their own `{"error": ...}` envelope from them.
Who:   Raised by services and dependencies; caught by handlers.

Exception Hierarchy:
    NeuroNotesError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    ├── ConfigurationError       → 500 Internal Server Error
    ├── AuthServiceError         → 503 Service Unavailable
    └── AIGatewayError           → 500 Internal Server Error (generic)
        ├── AIRateLimitError     → 429 Too Many Requests
        └── AICreditsExhaustedError → 402 Payment Required
"""

from typing import Any, Dict, Optional


class NeuroNotesError(Exception):
    """
    Base exception for all NeuroNotes application errors.

    Attributes:
        message:     User-facing error description (safe to return)
        context:     Additional debug info (logged but NOT returned)
        status_code: HTTP status the error maps to
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NeuroNotesError):
    """Client input failed validation (malformed body, empty patch, etc)."""

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


class AuthenticationError(NeuroNotesError):
    """Missing, malformed or rejected access token."""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(NeuroNotesError):
    """
    Requested resource does not exist for the current user.

    Notes owned by another user also raise this, so ownership is never
    revealed through a different status code.
    """

    status_code = 404

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


class DatabaseError(NeuroNotesError):
    """
    Database operation failed unexpectedly.

    The message returned to the client is always generic; query details go
    to the server log only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(NeuroNotesError):
    """A setting required by the requested operation is missing."""

    status_code = 500

    def __init__(
        self,
        message: str = "Server is not configured",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthServiceError(NeuroNotesError):
    """The hosted auth service could not be reached or answered unexpectedly."""

    status_code = 503

    def __init__(
        self,
        message: str = "Authentication service is temporarily unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AIGatewayError(NeuroNotesError):
    """
    The AI gateway failed or returned an unusable reply.

    The message is deliberately generic; the upstream status and body are
    kept in `context` for the log.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "AI gateway error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AIRateLimitError(AIGatewayError):
    """Upstream answered 429. Surfaced to the caller, never retried."""

    status_code = 429

    def __init__(
        self,
        message: str = "Rate limit exceeded. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AICreditsExhaustedError(AIGatewayError):
    """Upstream answered 402. Surfaced to the caller, never retried."""

    status_code = 402

    def __init__(
        self,
        message: str = "AI credits exhausted. Please add credits to your workspace.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
