from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400
    code = "DOMAIN_ERROR"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    """Raised when a referenced employee/attendance/leave/salary row is absent."""

    status_code = 404
    code = "NOT_FOUND"


class ConflictError(DomainError):
    # Reported as 400 to stay compatible with existing clients.
    status_code = 400
    code = "CONFLICT"


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are invalid."""

    status_code = 401
    code = "AUTHENTICATION_FAILED"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
    code = "FORBIDDEN"
