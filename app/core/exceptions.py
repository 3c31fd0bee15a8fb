"""
Application Exceptions
----------------------
Error taxonomy for the dealer backend and the FastAPI handlers that render it.

Every client-visible failure is an ApplicationError subclass carrying its HTTP
status. Handlers render them as ``{"error": message, "details": ...}``; details
are omitted when empty. Unexpected exceptions become an opaque 500 and are
logged in full on the server.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from loguru import logger


# ============================================================================
# BASE EXCEPTIONS
# ============================================================================


class ApplicationError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ConfigurationError(RuntimeError):
    """Fatal startup problem, e.g. a missing signing secret."""


# ============================================================================
# CLIENT ERRORS (4xx)
# ============================================================================


class ValidationFailed(ApplicationError):
    """400: schema violation or missing parameter."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class AuthenticationRequired(ApplicationError):
    """401: missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class PermissionDenied(ApplicationError):
    """403: authenticated but the role is not allowed."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to access this resource"


class NotFound(ApplicationError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource does not exist"


class Conflict(ApplicationError):
    """409: duplicate key, or the record is still referenced."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource conflict"


# ============================================================================
# SERVER ERRORS (5xx)
# ============================================================================


class InternalFailure(ApplicationError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


# ============================================================================
# HANDLERS
# ============================================================================


def validation_details(errors: list) -> list:
    """
    Flatten pydantic error entries into ``{"field", "message"}`` pairs.

    Args:
        errors: Output of ``ValidationError.errors()`` or
            ``RequestValidationError.errors()``

    Returns:
        list: One entry per violated constraint, field path joined with dots
    """
    details = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        details.append(
            {
                "field": ".".join(location) or None,
                "message": error.get("msg", "Invalid value"),
            }
        )
    return details


async def application_error_handler(
    request: Request, exc: ApplicationError
) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(
            f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}"
        )
    return JSONResponse(
        status_code=exc.status_code, content=jsonable_encoder(exc.to_dict())
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = validation_details(exc.errors())
    logger.info(f"{request.method} {request.url.path} -> 400: {details}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": details},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": InternalFailure.default_message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error rendering handlers to an application."""
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
