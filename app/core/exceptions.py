"""
Global exception handling for the application.
Standardizes error responses using Problem Details for HTTP APIs (RFC 7807).
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""

    code: Optional[str] = None

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class EntityNotFoundException(AppError):
    """Resource not found error."""
    def __init__(
        self,
        resource: str = "Entity",
        field: Optional[str] = None,
        value: Any = None,
        message: Optional[str] = None,
    ):
        details = {"resource": resource}
        if field is not None:
            details.update({"field": field, "value": value})
            message = message or f"{resource} not found with {field}: {value}"
        super().__init__(message or f"{resource} not found", status.HTTP_404_NOT_FOUND, details)


class DuplicateResourceException(AppError):
    """Uniqueness conflict against data already in the store."""
    def __init__(
        self,
        resource: str = "Entity",
        field: Optional[str] = None,
        value: Any = None,
        message: Optional[str] = None,
    ):
        details = {"resource": resource}
        if field is not None:
            details.update({"field": field, "value": value})
            message = message or f"{resource} already exists with {field}: {value}"
        super().__init__(message or f"{resource} already exists", status.HTTP_409_CONFLICT, details)


class InvalidRequestException(AppError):
    """Input rejected before any persistence attempt."""
    def __init__(self, message: str = "Invalid request", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class BusinessRuleViolationException(AppError):
    """Business logic violation error."""
    def __init__(self, message: str = "Business rule violation", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY, details)


class UnauthorizedException(AppError):
    """Authentication failure error."""
    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, details)


class AccountLockedException(UnauthorizedException):
    """Authentication refused because the account is locked.

    The message is the same whether the lock comes from failed attempts or
    from an administrator disabling the account.
    """

    code = "ACCOUNT_LOCKED"

    def __init__(self):
        super().__init__("Account is locked")


class InvalidTokenException(UnauthorizedException):
    """Token is malformed, unknown, revoked or expired."""

    code = "INVALID_TOKEN"

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class ForbiddenException(AppError):
    """Authorization failure error."""
    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_403_FORBIDDEN, details)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code or exc.__class__.__name__,
                "message": exc.message,
                "details": jsonable_encoder(exc.details),
                "path": request.url.path,
            }
        },
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle pydantic validation failures raised by request parsing or services."""
    errors = exc.errors() if isinstance(exc, (ValidationError, RequestValidationError)) else []
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "code": "ValidationError",
                "message": "Request validation failed",
                "details": {"errors": jsonable_encoder(errors, custom_encoder={Exception: str})},
                "path": request.url.path,
            }
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""

    if isinstance(exc, AppError):
        return await app_error_handler(request, exc)

    if isinstance(exc, (ValidationError, RequestValidationError)):
        return await validation_exception_handler(request, exc)

    logger.exception("Unexpected error occurred", path=request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "InternalServerError",
                "message": "An unexpected error occurred. Please try again later.",
                "path": request.url.path,
            }
        },
    )


def register_exception_handlers(app) -> None:
    """Attach the handlers above to a FastAPI application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
