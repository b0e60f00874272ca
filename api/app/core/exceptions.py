"""
Custom exceptions for the application.
"""


class PolyglotException(Exception):
    """Base exception for all Polyglot Cards application exceptions."""
    pass


class ValidationError(PolyglotException):
    """Raised when validation fails (missing field, too few cards for a mode, ...)."""
    pass


class NotFoundError(PolyglotException):
    """Raised when a requested resource is not found."""
    pass


class ConflictError(PolyglotException):
    """Raised when a request conflicts with the current state (e.g., answer already checked)."""
    pass


class PersistenceError(PolyglotException):
    """Raised when an insert, update or delete fails and the operation was rolled back."""
    pass


class ExternalServiceError(PolyglotException):
    """Raised when a translation or extraction service fails or times out."""
    pass
