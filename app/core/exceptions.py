"""
Application exceptions and their HTTP handlers.

Every flow failure is raised as an AppError subclass carrying the HTTP
status and the short message shown to the caller. Handlers registered in
app.main turn them into {"error": message} responses.
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.utils.logging_config import get_logger

logger = get_logger(__name__)


class AppError(Exception):
    """
    Base exception for the weather API.

    Subclasses set a default status code and message; callers may
    override the message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class Unauthenticated(AppError):
    """Raised when a request carries no credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication required"


class InvalidToken(AppError):
    """Raised when a credential is malformed, expired or wrongly signed."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid token"


class ValidationError(AppError):
    """Raised when a required field is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class EmailAlreadyRegistered(ValidationError):
    message = "User already exists with this email"


class NotFound(AppError):
    """Raised when a referenced record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class InvalidCredentials(AppError):
    """Raised when a password does not match the stored hash."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid email or password"


class UploadError(AppError):
    """Raised when the image host rejects or fails an upload."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to upload image"


class CityNotFound(AppError):
    """Raised when the weather provider does not know the city."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "City not found"


class ProviderError(AppError):
    """Raised for any other weather provider failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to fetch weather data"


class InternalError(AppError):
    """Raised for failures with no more specific category."""


_UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError as its status code and error envelope."""
    headers = _UNAUTHORIZED_HEADERS if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies and parameters as 400s."""
    details = [
        {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": details},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and hide their details from the caller."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=InternalError().to_dict(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error envelope handlers to the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
