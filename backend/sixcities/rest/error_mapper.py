"""
Six Cities Backend — Error Mapper
===================================

What:  The single place where failures become HTTP responses.
Why:   Middlewares, handlers and services only raise; none of them writes an
       error response itself.
How:   `map_exception` is called by the controller boundary for anything raised
       while a route pipeline runs. The same function backs the app-level
       exception handlers, so failures outside a pipeline (unknown URL, wrong
       verb) get the same body shape.

Response body:
    {"errorType": "<type>", "message": "<text>", "details": [{"field", "message"}]}
    `details` is present only for field-level failures.

Security: unexpected errors are answered with a fixed message; the stack trace
is logged server-side only.
"""

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sixcities.exceptions import HttpError
from sixcities.middleware.request_id import request_id_var
from sixcities.schemas.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."

_HTTP_ERROR_TYPES: Dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    404: "not_found",
    405: "method_not_allowed",
    413: "payload_too_large",
}


def _render(
    status_code: int,
    error_type: str,
    message: str,
    details: Optional[list] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body = ErrorResponse(error_type=error_type, message=message, details=details or None)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


def map_exception(exc: Exception) -> JSONResponse:
    """
    Translate any exception into the standard error response.

    HttpError           → its own status, type, message and field details
    HTTPException       → status passed through (Starlette routing errors)
    anything else       → 500 with a fixed message
    """
    rid = request_id_var.get("")

    if isinstance(exc, HttpError):
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s from %s: %s | Context: %s",
                rid,
                exc.error_type,
                exc.source or "unknown",
                exc.message,
                exc.context,
            )
        else:
            logger.warning(
                "[%s] %d %s from %s: %s",
                rid,
                exc.status_code,
                exc.error_type,
                exc.source or "unknown",
                exc.message,
            )
        details = [ErrorDetail(field=d.field, message=d.message) for d in exc.details]
        return _render(exc.status_code, exc.error_type, exc.message, details)

    if isinstance(exc, StarletteHTTPException):
        logger.warning("[%s] HTTP %d: %s", rid, exc.status_code, exc.detail)
        return _render(
            exc.status_code,
            _HTTP_ERROR_TYPES.get(exc.status_code, "http_error"),
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
    return _render(500, "internal_server_error", UNEXPECTED_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Route failures raised outside a controller pipeline through `map_exception`."""

    @app.exception_handler(HttpError)
    async def handle_http_error(request: Request, exc: HttpError):
        return map_exception(exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_starlette_http_error(request: Request, exc: StarletteHTTPException):
        return map_exception(exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        return map_exception(exc)
