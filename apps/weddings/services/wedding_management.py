"""
Wedding management service.

Handles wedding CRUD and the access check every guest-list operation goes through.
"""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet, Q

from apps.accounts.models import User
from apps.weddings.models import Wedding, WeddingRole, WeddingRoleType

from .exceptions import (
    WeddingNotFoundError,
    WeddingAccessDeniedError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def create_wedding(
    *,
    owner: User,
    partner1_name: str,
    partner2_name: str = '',
    **fields
) -> Wedding:
    """
    Create a wedding and the owner's role row in one transaction.

    Args:
        owner: Couple account that owns the wedding
        partner1_name: First partner's name
        partner2_name: Second partner's name
        **fields: date, location, guest_count_estimate, budget

    Returns:
        Created Wedding instance
    """
    wedding = Wedding.objects.create(
        owner=owner,
        partner1_name=partner1_name,
        partner2_name=partner2_name,
        **fields
    )
    WeddingRole.objects.create(
        user=owner,
        wedding=wedding,
        role=WeddingRoleType.OWNER
    )
    logger.info("Created wedding %s for %s", wedding.id, owner.id)
    return wedding


def get_wedding_by_id(*, wedding_id: UUID) -> Wedding:
    """
    Raises:
        WeddingNotFoundError: If wedding doesn't exist
    """
    try:
        return Wedding.objects.select_related('owner').get(id=wedding_id)
    except (Wedding.DoesNotExist, ValidationError):
        raise WeddingNotFoundError(f"Wedding with ID {wedding_id} not found")


def get_wedding_for_user(
    *,
    wedding_id: UUID,
    user: User,
    require_edit: bool = False
) -> Wedding:
    """
    Load a wedding and check the user's role on it.

    Owners and planners may edit; viewers may only read.

    Args:
        wedding_id: UUID of the wedding
        user: Requesting user
        require_edit: Demand an owner or planner role

    Returns:
        Wedding instance

    Raises:
        WeddingNotFoundError: If wedding doesn't exist
        WeddingAccessDeniedError: If the user lacks the required role
    """
    wedding = get_wedding_by_id(wedding_id=wedding_id)

    allowed = wedding.can_edit(user) if require_edit else wedding.has_access(user)
    if not allowed:
        logger.warning(
            "User %s denied %s access to wedding %s",
            getattr(user, 'id', None),
            'edit' if require_edit else 'read',
            wedding_id,
        )
        raise WeddingAccessDeniedError(
            "Access denied: You do not have permission for this wedding"
        )

    return wedding


def get_user_weddings(*, user: User) -> QuerySet[Wedding]:
    """All weddings the user owns or collaborates on."""
    return (
        Wedding.objects
        .filter(Q(owner=user) | Q(roles__user=user))
        .select_related('owner')
        .distinct()
    )


@transaction.atomic
def update_wedding(
    *,
    wedding_id: UUID,
    user: User,
    **fields
) -> Wedding:
    """
    Update wedding details (owner or planner).

    Raises:
        WeddingNotFoundError: If wedding doesn't exist
        WeddingAccessDeniedError: If user cannot edit
    """
    get_wedding_for_user(wedding_id=wedding_id, user=user, require_edit=True)

    wedding = Wedding.objects.select_for_update().get(id=wedding_id)
    for field, value in fields.items():
        setattr(wedding, field, value)
    wedding.save()

    return wedding


@transaction.atomic
def delete_wedding(*, wedding_id: UUID, user: User) -> None:
    """
    Delete a wedding and everything under it (owner only).

    Raises:
        WeddingNotFoundError: If wedding doesn't exist
        WeddingAccessDeniedError: If user is not the owner
    """
    wedding = get_wedding_by_id(wedding_id=wedding_id)

    if wedding.owner_id != user.id:
        raise WeddingAccessDeniedError("Only the wedding owner can delete the wedding")

    wedding.delete()
    logger.info("Deleted wedding %s", wedding_id)
