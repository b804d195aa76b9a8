"""
Six Cities Backend — HTTP Error Hierarchy
===========================================

What:  Typed errors raised by middlewares, handlers and services.
How:   Each class fixes an HTTP status code and a machine-readable error type.
       The error mapper (sixcities.rest.error_mapper) is the only place that
       turns them into responses.
Who:   Raised anywhere in the request pipeline; caught by the error mapper.

Exception Hierarchy:
    HttpError (base)
    ├── ValidationError         → 400 Bad Request (body/query field violations)
    ├── BadIdentifierError      → 400 Bad Request (malformed path identifier)
    ├── UploadFailureError      → 400 Bad Request (missing/unreadable upload)
    ├── UnauthorizedError       → 401 Unauthorized
    ├── NotFoundError           → 404 Not Found
    ├── ConflictError           → 409 Conflict
    └── FileStorageError        → 500 Internal Server Error

    Anything that is not an HttpError is answered with a generic 500.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class FieldViolation:
    """One failed constraint on one request field."""

    field: str
    message: str


class HttpError(Exception):
    """
    Base exception for every error that maps onto an HTTP response.

    Attributes:
        status_code: HTTP status returned to the client
        message:     User-facing error description (safe to return)
        source:      Component that raised the error (logged, not returned)
        details:     Field-level violations, returned as `details`
        context:     Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500
    error_type: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        source: Optional[str] = None,
        details: Optional[List[FieldViolation]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.source = source
        self.details = list(details or [])
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(HttpError):
    """
    Raised when a request body or query parameter fails validation.

    Example response:
        {
            "errorType": "validation_error",
            "message": "Validation failed for 2 field(s)",
            "details": [
                {"field": "title", "message": "Field required"},
                {"field": "price", "message": "Input should be greater than or equal to 100"}
            ]
        }
    """

    status_code = 400
    error_type = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        source: Optional[str] = None,
        details: Optional[List[FieldViolation]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if field and not details:
            details = [FieldViolation(field=field, message=message)]
        super().__init__(message=message, source=source, details=details, context=context)
        self.field = field


class BadIdentifierError(HttpError):
    """Raised when a path parameter is not a well-formed resource identifier."""

    status_code = 400
    error_type = "bad_identifier"

    def __init__(self, param_name: str, value: str, source: Optional[str] = None):
        super().__init__(
            message=f"{value} is invalid {param_name}",
            source=source,
            context={"param": param_name, "value": value},
        )
        self.param_name = param_name


class UploadFailureError(HttpError):
    """Raised when a multipart upload is absent, empty, too large or of a wrong type."""

    status_code = 400
    error_type = "upload_failure"

    def __init__(
        self,
        message: str = "No file uploaded",
        field: Optional[str] = None,
        source: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        details = [FieldViolation(field=field, message=message)] if field else None
        super().__init__(message=message, source=source, details=details, context=context)
        self.field = field


class UnauthorizedError(HttpError):
    """Raised when a request lacks valid credentials."""

    status_code = 401
    error_type = "unauthorized"

    def __init__(self, message: str = "Unauthorized", source: Optional[str] = None):
        super().__init__(message=message, source=source)


class NotFoundError(HttpError):
    """
    Raised when a requested resource does not exist.

    Also used for ownership mismatches: a user touching someone else's offer
    gets the same 404 as for an offer that does not exist.
    """

    status_code = 404
    error_type = "not_found"

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        source: Optional[str] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            message = f"{resource} not found"
            if resource_id:
                message = f"{resource} with {resource_id} not found."
        ctx: Dict[str, Any] = {"resource": resource}
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, source=source, context=ctx)


class ConflictError(HttpError):
    """Raised when the request collides with existing state (e.g. e-mail taken)."""

    status_code = 409
    error_type = "conflict"


class FileStorageError(HttpError):
    """
    Raised when the upload directory cannot be written.

    The message returned to the client is generic; the OS error goes to
    `context` and is logged server-side only.
    """

    status_code = 500
    error_type = "server_error"

    def __init__(
        self,
        message: str = "Failed to save uploaded file. Please try again.",
        source: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, source=source, context=context)
