class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced staff/attendance/leave/shift does not exist."""


class ConflictError(DomainError):
    """Raised when a natural key is already taken (duplicate or overlap)."""


class AuthenticationError(DomainError):
    """Raised when login credentials or bearer tokens are invalid."""


class StorageError(DomainError):
    """Raised when the database is unavailable or fails unexpectedly."""
