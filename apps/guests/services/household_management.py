"""
Household management service.

Handles household CRUD and the RSVP magic links sent to each household.
"""

import logging
import secrets
from datetime import timedelta
from typing import Optional, Tuple
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet, Count
from django.utils import timezone

from apps.accounts.models import User
from apps.weddings.services import get_wedding_for_user

from ..models import Household
from .exceptions import (
    HouseholdNotFoundError,
    InvalidMagicLinkError,
    MagicLinkExpiredError,
)

logger = logging.getLogger(__name__)


def get_household_for_user(
    *,
    household_id: UUID,
    user: User,
    require_edit: bool = False
) -> Household:
    """
    Raises:
        HouseholdNotFoundError: If household doesn't exist
        WeddingAccessDeniedError: If user lacks the role on its wedding
    """
    try:
        household = Household.objects.select_related('wedding').get(id=household_id)
    except (Household.DoesNotExist, ValidationError):
        raise HouseholdNotFoundError(f"Household with ID {household_id} not found")

    get_wedding_for_user(wedding_id=household.wedding_id, user=user, require_edit=require_edit)
    return household


def get_wedding_households(*, wedding_id: UUID, user: User) -> QuerySet[Household]:
    """Households of a wedding with their guest counts."""
    get_wedding_for_user(wedding_id=wedding_id, user=user)

    return (
        Household.objects
        .filter(wedding_id=wedding_id)
        .annotate(guest_count=Count('guests'))
        .prefetch_related('guests')
        .order_by('created_at')
    )


def create_household(*, wedding_id: UUID, user: User, name: str, **fields) -> Household:
    """
    Raises:
        WeddingNotFoundError: If wedding doesn't exist
        WeddingAccessDeniedError: If user cannot edit the wedding
    """
    wedding = get_wedding_for_user(wedding_id=wedding_id, user=user, require_edit=True)
    return Household.objects.create(wedding=wedding, name=name, **fields)


@transaction.atomic
def update_household(*, household_id: UUID, user: User, **fields) -> Household:
    get_household_for_user(household_id=household_id, user=user, require_edit=True)

    household = Household.objects.select_for_update().get(id=household_id)
    for field, value in fields.items():
        setattr(household, field, value)
    household.save()
    return household


@transaction.atomic
def delete_household(*, household_id: UUID, user: User) -> None:
    """Deletes the household together with its guests and their invitations."""
    household = get_household_for_user(household_id=household_id, user=user, require_edit=True)
    household.delete()
    logger.info("Deleted household %s", household_id)


@transaction.atomic
def generate_magic_token(
    *,
    household_id: UUID,
    user: User,
    expires_in_days: Optional[int] = None
) -> Tuple[str, Household]:
    """
    Issue a new RSVP magic link token for a household.

    Only the SHA-256 hash is stored; the plaintext is returned once.
    Issuing a new token invalidates the previous one.

    Returns:
        Plaintext token and the updated household (carries the expiry)
    """
    get_household_for_user(household_id=household_id, user=user, require_edit=True)

    if expires_in_days is None:
        expires_in_days = settings.MAGIC_LINK_EXPIRY_DAYS

    token = secrets.token_hex(32)
    household = Household.objects.select_for_update().get(id=household_id)
    household.magic_link_token_hash = Household.hash_token(token)
    household.magic_link_expires = timezone.now() + timedelta(days=expires_in_days)
    household.save(update_fields=['magic_link_token_hash', 'magic_link_expires'])

    return token, household


@transaction.atomic
def revoke_magic_token(*, household_id: UUID, user: User) -> None:
    get_household_for_user(household_id=household_id, user=user, require_edit=True)

    Household.objects.filter(id=household_id).update(
        magic_link_token_hash=None,
        magic_link_expires=None,
    )


def get_household_by_magic_token(*, token: str) -> Household:
    """
    Resolve a plaintext magic link token (guest-facing, no login).

    Raises:
        InvalidMagicLinkError: If no household holds this token
        MagicLinkExpiredError: If the token has expired
    """
    try:
        household = (
            Household.objects
            .select_related('wedding')
            .get(magic_link_token_hash=Household.hash_token(token))
        )
    except Household.DoesNotExist:
        raise InvalidMagicLinkError("Invalid or expired magic link")

    if household.magic_link_expires and household.magic_link_expires < timezone.now():
        raise MagicLinkExpiredError(
            "Magic link has expired. Please contact the couple for a new invitation."
        )

    return household


def build_magic_link(token: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/rsvp/{token}"
