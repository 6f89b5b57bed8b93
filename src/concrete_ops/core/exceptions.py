from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations.

    `details` is an optional human-readable explanation; `extra` holds additional
    JSON fields merged into the error body.
    """

    status_code = 400

    def __init__(self, message: str, *, details: str | None = None, extra: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.extra = dict(extra or {})


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when credentials or bearer tokens are missing or invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Raised when a unique resource already exists or is already taken."""

    status_code = 409


class ServiceUnavailableError(DomainError):
    status_code = 503
