"""
Domain-specific exceptions for the guests app.

Access failures are raised by the weddings services
(WeddingNotFoundError, WeddingAccessDeniedError) and pass through unchanged.
"""


class GuestsServiceError(Exception):
    """Base exception for guests services."""
    pass


class HouseholdNotFoundError(GuestsServiceError):
    """Raised when a household does not exist."""
    pass


class GuestNotFoundError(GuestsServiceError):
    """Raised when a guest does not exist."""
    pass


class InvalidHouseholdError(GuestsServiceError):
    """Raised when a household does not belong to the guest's wedding."""
    pass


class InvalidMergeError(GuestsServiceError):
    """Raised when merge parameters are invalid."""
    pass


class InvitationNotFoundError(GuestsServiceError):
    """Raised when an invitation does not exist."""
    pass


class InvalidInvitationError(GuestsServiceError):
    """Raised when guest and event belong to different weddings."""
    pass


class DuplicateInvitationError(GuestsServiceError):
    """Raised when the guest is already invited to the event."""
    pass


class InvalidMagicLinkError(GuestsServiceError):
    """Raised when a magic link token matches no household."""
    pass


class MagicLinkExpiredError(GuestsServiceError):
    """Raised when a magic link token is past its expiry."""
    pass
