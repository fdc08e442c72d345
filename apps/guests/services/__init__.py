"""Services for guest list business logic."""

from .exceptions import (
    GuestsServiceError,
    HouseholdNotFoundError,
    GuestNotFoundError,
    InvalidHouseholdError,
    InvalidMergeError,
    InvitationNotFoundError,
    InvalidInvitationError,
    DuplicateInvitationError,
    InvalidMagicLinkError,
    MagicLinkExpiredError,
)
from .household_management import (
    get_household_for_user,
    get_wedding_households,
    create_household,
    update_household,
    delete_household,
    generate_magic_token,
    revoke_magic_token,
    get_household_by_magic_token,
    build_magic_link,
)
from .guest_management import (
    get_guest_for_user,
    get_wedding_guests,
    create_guest,
    update_guest,
    delete_guest,
    bulk_import_guests,
)
from .household_deduplication import (
    normalize_email,
    normalize_phone,
    name_similarity,
    score_household_pair,
    score_households,
    build_duplicate_candidates,
    find_duplicate_households,
    DUPLICATE_CONFIDENCE_THRESHOLD,
)
from .household_merging import (
    merge_households,
)
from .import_duplicates import (
    detect_import_duplicates,
    check_import_duplicates,
    IMPORT_DUPLICATE_THRESHOLD,
)
from .invitation_management import (
    create_invitation,
    get_invitation_for_user,
    update_rsvp,
    delete_invitation,
)

__all__ = [
    # Exceptions
    'GuestsServiceError',
    'HouseholdNotFoundError',
    'GuestNotFoundError',
    'InvalidHouseholdError',
    'InvalidMergeError',
    'InvitationNotFoundError',
    'InvalidInvitationError',
    'DuplicateInvitationError',
    'InvalidMagicLinkError',
    'MagicLinkExpiredError',
    # Households
    'get_household_for_user',
    'get_wedding_households',
    'create_household',
    'update_household',
    'delete_household',
    'generate_magic_token',
    'revoke_magic_token',
    'get_household_by_magic_token',
    'build_magic_link',
    # Guests
    'get_guest_for_user',
    'get_wedding_guests',
    'create_guest',
    'update_guest',
    'delete_guest',
    'bulk_import_guests',
    # Household Deduplication
    'normalize_email',
    'normalize_phone',
    'name_similarity',
    'score_household_pair',
    'score_households',
    'build_duplicate_candidates',
    'find_duplicate_households',
    'DUPLICATE_CONFIDENCE_THRESHOLD',
    # Household Merging
    'merge_households',
    # Import Duplicates
    'detect_import_duplicates',
    'check_import_duplicates',
    'IMPORT_DUPLICATE_THRESHOLD',
    # Invitations
    'create_invitation',
    'get_invitation_for_user',
    'update_rsvp',
    'delete_invitation',
]
