"""
Image Tagger Backend — Custom Exception Hierarchy
===================================================

What:  Application-specific exceptions for every failure the API can report.
How:   Each exception carries a user-facing message and an optional context dict.
       Global exception handlers (registered in main.py) translate them into
       structured JSON responses with the matching HTTP status code.
Who:   Raised by services, storage backends and the access guard.
When:  During request processing, whenever a rule or lookup fails.

Exception Hierarchy:
    TaggerError (base)
    ├── ValidationError      → 400 Bad Request (malformed or missing input)
    ├── ConflictError        → 400 Bad Request (duplicate registration)
    ├── UnauthorizedError    → 401 Unauthorized (missing/unknown identity)
    ├── ForbiddenError       → 403 Forbidden (not the resource owner)
    ├── NotFoundError        → 404 Not Found
    ├── ImageSourceError     → 503 Service Unavailable (external image source)
    └── StorageError         → 500 Internal Server Error

Conflicts use 400 rather than 409: registration of a taken name is reported
the same way as any other rejected registration.
"""

from typing import Any, Dict, Optional


class TaggerError(Exception):
    """
    Base exception for all Image Tagger application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TaggerError):
    """
    Raised when client input fails validation.

    When:    Empty names, non-numeric coordinates, empty comments.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "Invalid thread data. x, y must be numbers and comment must be a string",
            "code": "validation_error",
            "request_id": "a1b2c3d4"
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


class ConflictError(TaggerError):
    """
    Raised when a record would violate a uniqueness rule.

    When:    Registering a display name that already exists.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Record already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthorizedError(TaggerError):
    """
    Raised when a request carries no identity claim, or claims an unknown user.

    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(TaggerError):
    """
    Raised when an authenticated principal tries to mutate a record it does not own.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "You do not have permission to modify this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TaggerError):
    """
    Raised when a referenced record does not exist.

    When:    Unknown image id, unknown thread id, unknown user at login.
    HTTP:    404 Not Found

    The message reads "<Resource> not found" so it can be shown to the user
    as-is; the id goes into the context for the server log.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ImageSourceError(TaggerError):
    """
    Raised when the external image source cannot provide a reference.

    When:    Transport failure or non-success status while verifying a URL.
    HTTP:    503 Service Unavailable

    There is no retry: the failure surfaces as the request's failure.
    """

    def __init__(
        self,
        message: str = "Image source is temporarily unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageError(TaggerError):
    """
    Raised when a storage backend fails unexpectedly.

    HTTP:    500 Internal Server Error

    The client only ever sees a generic message; backend details are logged.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
