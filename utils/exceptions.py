"""
Domain error taxonomy.

Every error carries the HTTP status and the error code used in the uniform
error envelope (see api/errors.py). Errors with status 500 are internal:
their message is logged server-side and never returned to the client.
"""
from __future__ import annotations


class AuthError(Exception):
    status_code = 500
    error = "INTERNAL_ERROR"
    message = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    @property
    def internal(self) -> bool:
        return self.status_code >= 500


class Conflict(AuthError):
    status_code = 409
    error = "CONFLICT"
    message = "Email or username already exists"


class InvalidCredentials(AuthError):
    """Same error for an unknown email and a wrong password."""
    status_code = 401
    error = "INVALID_CREDENTIALS"
    message = "Invalid email or password"


class AccountDisabled(AuthError):
    status_code = 403
    error = "ACCOUNT_DISABLED"
    message = "Account is disabled"


class InvalidRefreshToken(AuthError):
    status_code = 401
    error = "INVALID_REFRESH_TOKEN"
    message = "Invalid refresh token"


class RefreshTokenExpired(AuthError):
    status_code = 401
    error = "REFRESH_TOKEN_EXPIRED"
    message = "Refresh token expired"


class InvalidToken(AuthError):
    status_code = 401
    error = "INVALID_TOKEN"
    message = "Invalid or expired token"


class NotFound(AuthError):
    status_code = 404
    error = "NOT_FOUND"
    message = "Resource not found"


class StorageError(AuthError):
    pass


class HashingError(AuthError):
    pass
