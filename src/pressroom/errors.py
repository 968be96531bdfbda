"""Error taxonomy and the JSON error envelope.

Learn: Handlers and services raise AppError subclasses; the exception
handlers registered in create_app() turn them into

    {"status": "Error", "message": "...", "error": "<kind>"}

The message is always a fixed, user-facing string. The underlying cause
(database errors, SMTP failures, ...) goes to the structlog channel only,
so store internals never leak into a response body.
"""

from enum import Enum

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class ErrorKind(str, Enum):
    """Machine-readable error category, returned as the `error` field."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class ConfigurationError(RuntimeError):
    """Raised at construction time when required configuration is missing."""


class AppError(Exception):
    """Base for every error that maps onto an HTTP response."""

    status_code = 500
    kind = ErrorKind.INTERNAL
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, kind: ErrorKind | None = None):
        self.message = message or self.default_message
        if kind is not None:
            self.kind = kind
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    kind = ErrorKind.VALIDATION
    default_message = "Invalid request"


class NotFoundError(AppError):
    status_code = 404
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class AuthError(AppError):
    """Credential missing or unusable."""

    status_code = 401
    kind = ErrorKind.UNAUTHENTICATED
    default_message = "Not authorized"


class AuthorizationError(AppError):
    """Authenticated, but the role does not allow the operation."""

    status_code = 401
    kind = ErrorKind.FORBIDDEN
    default_message = "You are not authorised"


class ForbiddenError(AppError):
    status_code = 403
    kind = ErrorKind.FORBIDDEN
    default_message = "Forbidden"


class InternalError(AppError):
    status_code = 500
    kind = ErrorKind.INTERNAL


def error_body(message: str, kind: ErrorKind) -> dict:
    return {"status": "Error", "message": message, "error": kind.value}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError in the standard envelope."""
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            path=request.url.path,
            kind=exc.kind.value,
            cause=repr(exc.__cause__) if exc.__cause__ else None,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.kind),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies are a 400, not FastAPI's default 422."""
    logger.info("request_invalid", path=request.url.path, errors=exc.errors())
    return JSONResponse(
        status_code=400,
        content=error_body("Invalid request body", ErrorKind.VALIDATION),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback for anything that escaped the handlers."""
    logger.exception("unhandled_error", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_body(InternalError.default_message, ErrorKind.INTERNAL),
    )
