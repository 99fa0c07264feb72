"""
Error taxonomy for the API.

Request-level errors subclass HTTPException so they can be raised from
services and dependencies alike; the handlers registered in main.py render
them as ``{"message": ..., "error": ...}``.
"""

from typing import Optional

from fastapi import HTTPException, status


class ConfigurationError(RuntimeError):
    """Raised when the service is missing required configuration."""


class InvalidToken(Exception):
    """Raised when a session token is malformed, forged or expired."""


class AppError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        error: Optional[str] = None,
        headers: Optional[dict] = None,
    ):
        super().__init__(
            status_code=self.status_code,
            detail=message or self.default_message,
            headers=headers,
        )
        self.error = error


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Incorrect inputs"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class Internal(AppError):
    pass
