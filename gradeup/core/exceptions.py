"""Custom exceptions for the GradeUp application."""

from __future__ import annotations


class GradeUpException(Exception):
    """Base exception for GradeUp application."""

    pass


class AuthenticationError(GradeUpException):
    """Raised when the caller identity is missing or invalid."""

    pass


class AuthorizationError(GradeUpException):
    """Raised when an authenticated caller lacks permission."""

    pass


class NotFoundError(GradeUpException):
    """Raised when a resource is absent or not visible to the caller."""

    pass


class SignatureNotFoundError(NotFoundError):
    """Raised when a contract has no signature record for a party."""

    pass


class InvalidStateError(GradeUpException):
    """Raised when an operation is not permitted in the current lifecycle state."""

    pass


class ConflictError(GradeUpException):
    """Raised when an action was already applied (e.g. signing twice)."""

    pass


class ValidationError(GradeUpException):
    """Raised when validation fails.

    ``fields`` maps a field path to its list of messages.
    """

    def __init__(self, message: str = "Validation failed", fields: dict[str, list[str]] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or {}


class UpstreamError(GradeUpException):
    """Raised when the payment gateway or data store reports a failure."""

    pass


class DatabaseError(GradeUpException):
    """Raised when a database operation fails."""

    pass


class ConfigurationError(GradeUpException):
    """Raised when configuration is invalid."""

    pass
