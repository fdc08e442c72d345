"""
Collaborator management service.

A wedding's owner (or a planner) can invite other accounts by email and
give them a planner or viewer role.
"""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.weddings.models import WeddingRole, WeddingRoleType

from .exceptions import (
    AlreadyCollaboratorError,
    NotCollaboratorError,
    CannotRemoveOwnerError,
    UserNotFoundError,
)
from .wedding_management import get_wedding_for_user

logger = logging.getLogger(__name__)


@transaction.atomic
def add_collaborator(
    *,
    wedding_id: UUID,
    email: str,
    role: str,
    added_by: User
) -> WeddingRole:
    """
    Give an existing account a role on the wedding.

    Args:
        wedding_id: UUID of the wedding
        email: Email of the account to add
        role: 'planner' or 'viewer'
        added_by: User performing the change (must be able to edit)

    Returns:
        Created WeddingRole

    Raises:
        WeddingNotFoundError: If wedding doesn't exist
        WeddingAccessDeniedError: If added_by cannot edit
        UserNotFoundError: If no account has that email
        AlreadyCollaboratorError: If the account already has a role
        ValueError: If role is not assignable
    """
    if role not in [WeddingRoleType.PLANNER, WeddingRoleType.VIEWER]:
        raise ValueError("Invalid role. Must be one of: planner, viewer")

    wedding = get_wedding_for_user(wedding_id=wedding_id, user=added_by, require_edit=True)

    try:
        user = User.objects.get(email__iexact=email)
    except User.DoesNotExist:
        raise UserNotFoundError(f"No account found for {email}")

    if wedding.has_access(user):
        raise AlreadyCollaboratorError(f"{email} already has access to this wedding")

    try:
        with transaction.atomic():
            collaborator = WeddingRole.objects.create(
                user=user,
                wedding=wedding,
                role=role
            )
    except IntegrityError:
        raise AlreadyCollaboratorError(f"{email} already has access to this wedding")

    logger.info("Added %s as %s on wedding %s", user.id, role, wedding.id)
    return collaborator


@transaction.atomic
def remove_collaborator(
    *,
    wedding_id: UUID,
    user_id: UUID,
    removed_by: User
) -> None:
    """
    Revoke a collaborator's role. The owner cannot be removed.

    Raises:
        WeddingNotFoundError: If wedding doesn't exist
        WeddingAccessDeniedError: If removed_by cannot edit
        CannotRemoveOwnerError: If user_id is the owner
        NotCollaboratorError: If user has no role on the wedding
    """
    wedding = get_wedding_for_user(wedding_id=wedding_id, user=removed_by, require_edit=True)

    if str(wedding.owner_id) == str(user_id):
        raise CannotRemoveOwnerError("Cannot remove the wedding owner")

    try:
        collaborator = (
            WeddingRole.objects
            .select_for_update()
            .get(wedding=wedding, user_id=user_id)
        )
    except (WeddingRole.DoesNotExist, ValidationError):
        raise NotCollaboratorError("User is not a collaborator on this wedding")

    collaborator.delete()


def get_collaborators(*, wedding_id: UUID, user: User) -> QuerySet[WeddingRole]:
    """
    Raises:
        WeddingNotFoundError: If wedding doesn't exist
        WeddingAccessDeniedError: If user has no access
    """
    get_wedding_for_user(wedding_id=wedding_id, user=user)

    return (
        WeddingRole.objects
        .filter(wedding_id=wedding_id)
        .select_related('user')
        .order_by('joined_at')
    )
