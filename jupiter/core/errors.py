"""
Operational errors.

Every expected failure in the API is one of these. Each class carries a
stable ``code`` and the HTTP status it maps to, so route handlers never
build error responses by hand: they raise, and the exception handler in
``jupiter.api.app`` renders ``{success: false, message, data}``.
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base class for operational (expected) errors."""

    code: str = "ERROR"
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, detail: Any = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(code={self.code}, message={self.message!r})>"


class BadRequestError(AppError):
    code = "BAD_REQUEST"
    status_code = 400
    default_message = "Bad request"


class UnauthenticatedError(AppError):
    """No identity was presented."""

    code = "UNAUTHENTICATED"
    status_code = 401
    default_message = "Unauthorized access"


class TokenError(AppError):
    """Base exception for token errors."""

    status_code = 401


class TokenInvalidError(TokenError):
    """Token is invalid or malformed."""

    code = "INVALID_TOKEN"
    default_message = "Invalid token"


class TokenExpiredError(TokenError):
    """Token has expired."""

    code = "EXPIRED_TOKEN"
    default_message = "Token has expired"


class InvalidCredentialsError(AppError):
    code = "INVALID_CREDENTIALS"
    status_code = 401
    default_message = "Invalid email or password"


class AccountDeactivatedError(AppError):
    code = "ACCOUNT_DEACTIVATED"
    status_code = 401
    default_message = "Account is deactivated. Please contact support."


class ForbiddenError(AppError):
    """Authenticated, but the role or ownership check said no."""

    code = "FORBIDDEN"
    status_code = 403
    default_message = "Access forbidden"


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class OwnerNotFoundError(NotFoundError):
    """The student a record (or account) points at does not exist."""

    code = "OWNER_NOT_FOUND"
    default_message = "Student not found"


class ConflictError(AppError):
    code = "CONFLICT"
    status_code = 409
    default_message = "Resource already exists"


class AlreadyVerifiedError(AppError):
    code = "ALREADY_VERIFIED"
    status_code = 400
    default_message = "Record is already verified"


class IncorrectPasswordError(AppError):
    code = "INCORRECT_CURRENT"
    status_code = 400
    default_message = "Current password is incorrect"
