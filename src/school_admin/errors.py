from __future__ import annotations

from enum import Enum


class AppError(Exception):
    """Base error for expected failures."""

    code = "APP_ERROR"

    def __init__(self, message: str, *, http_status: int = 400):
        super().__init__(message)
        self.message = message
        self.http_status = http_status


class AuthError(AppError):
    code = "AUTHENTICATION_REQUIRED"

    def __init__(self, message: str = "Authentication required."):
        super().__init__(message, http_status=401)


class ForbiddenError(AppError):
    code = "AUTHORIZATION_FAILED"

    def __init__(self, message: str = "This action is unauthorized."):
        super().__init__(message, http_status=403)


class NotFoundError(AppError):
    """
    Raised for absent resources and for ownership failures alike, so callers
    cannot tell a hidden resource from a missing one.
    """

    code = "RESOURCE_NOT_FOUND"

    def __init__(self, message: str = "Resource not found."):
        super().__init__(message, http_status=404)


class ValidationReason(str, Enum):
    EMPTY = "empty"
    TOO_MANY = "too_many"


class ValidationError(AppError):
    code = "VALIDATION_FAILED"

    def __init__(self, message: str, *, reason: ValidationReason | None = None):
        super().__init__(message, http_status=422)
        self.reason = reason
