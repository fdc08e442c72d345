"""
Domain-specific exceptions for the weddings app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class WeddingsServiceError(Exception):
    """Base exception for all weddings service errors."""
    pass


class WeddingNotFoundError(WeddingsServiceError):
    """Raised when a wedding does not exist."""
    pass


class WeddingAccessDeniedError(WeddingsServiceError):
    """Raised when a user has no (or insufficient) role on a wedding."""
    pass


class AlreadyCollaboratorError(WeddingsServiceError):
    """Raised when a user already has a role on the wedding."""
    pass


class NotCollaboratorError(WeddingsServiceError):
    """Raised when removing a user who has no role on the wedding."""
    pass


class CannotRemoveOwnerError(WeddingsServiceError):
    """Raised when attempting to remove the wedding owner."""
    pass


class UserNotFoundError(WeddingsServiceError):
    """Raised when inviting an email that has no account."""
    pass


class EventNotFoundError(WeddingsServiceError):
    """Raised when an event does not exist."""
    pass
