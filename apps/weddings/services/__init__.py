"""
Weddings app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions.
"""

from .exceptions import (
    WeddingsServiceError,
    WeddingNotFoundError,
    WeddingAccessDeniedError,
    AlreadyCollaboratorError,
    NotCollaboratorError,
    CannotRemoveOwnerError,
    UserNotFoundError,
    EventNotFoundError,
)

from .wedding_management import (
    create_wedding,
    get_wedding_by_id,
    get_wedding_for_user,
    get_user_weddings,
    update_wedding,
    delete_wedding,
)

from .collaborator_management import (
    add_collaborator,
    remove_collaborator,
    get_collaborators,
)

from .event_management import (
    create_event,
    get_event_for_user,
    update_event,
    delete_event,
)


__all__ = [
    # Exceptions
    'WeddingsServiceError',
    'WeddingNotFoundError',
    'WeddingAccessDeniedError',
    'AlreadyCollaboratorError',
    'NotCollaboratorError',
    'CannotRemoveOwnerError',
    'UserNotFoundError',
    'EventNotFoundError',

    # Wedding Management
    'create_wedding',
    'get_wedding_by_id',
    'get_wedding_for_user',
    'get_user_weddings',
    'update_wedding',
    'delete_wedding',

    # Collaborators
    'add_collaborator',
    'remove_collaborator',
    'get_collaborators',

    # Events
    'create_event',
    'get_event_for_user',
    'update_event',
    'delete_event',
]
