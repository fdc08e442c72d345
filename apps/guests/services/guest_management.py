"""
Guest management service.

Handles guest CRUD and bulk import from spreadsheets.
"""

import logging
from collections import Counter
from typing import List, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError, DatabaseError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.weddings.services import get_wedding_for_user

from ..models import Guest, Household, PriorityTier, RelationshipTier
from .exceptions import (
    GuestNotFoundError,
    HouseholdNotFoundError,
    InvalidHouseholdError,
)

logger = logging.getLogger(__name__)


def _resolve_household(*, wedding_id: UUID, household_id: Optional[UUID]) -> Optional[Household]:
    if household_id is None:
        return None
    try:
        household = Household.objects.get(id=household_id)
    except (Household.DoesNotExist, ValidationError):
        raise HouseholdNotFoundError(f"Household with ID {household_id} not found")
    if household.wedding_id != wedding_id:
        raise InvalidHouseholdError("Household belongs to a different wedding")
    return household


def get_guest_for_user(*, guest_id: UUID, user: User, require_edit: bool = False) -> Guest:
    """
    Raises:
        GuestNotFoundError: If guest doesn't exist
        WeddingAccessDeniedError: If user lacks the role on its wedding
    """
    try:
        guest = Guest.objects.select_related('household').get(id=guest_id)
    except (Guest.DoesNotExist, ValidationError):
        raise GuestNotFoundError(f"Guest with ID {guest_id} not found")

    get_wedding_for_user(wedding_id=guest.wedding_id, user=user, require_edit=require_edit)
    return guest


def get_wedding_guests(
    *,
    wedding_id: UUID,
    user: User,
    household_id: Optional[UUID] = None
) -> QuerySet[Guest]:
    get_wedding_for_user(wedding_id=wedding_id, user=user)

    queryset = Guest.objects.filter(wedding_id=wedding_id).select_related('household')
    if household_id:
        queryset = queryset.filter(household_id=household_id)
    return queryset.order_by('created_at')


def create_guest(
    *,
    wedding_id: UUID,
    user: User,
    name: str,
    household_id: Optional[UUID] = None,
    **fields
) -> Guest:
    """
    Raises:
        WeddingNotFoundError: If wedding doesn't exist
        WeddingAccessDeniedError: If user cannot edit the wedding
        HouseholdNotFoundError / InvalidHouseholdError: For a bad household
    """
    wedding = get_wedding_for_user(wedding_id=wedding_id, user=user, require_edit=True)
    household = _resolve_household(wedding_id=wedding.id, household_id=household_id)
    return Guest.objects.create(wedding=wedding, household=household, name=name, **fields)


@transaction.atomic
def update_guest(*, guest_id: UUID, user: User, **fields) -> Guest:
    guest = get_guest_for_user(guest_id=guest_id, user=user, require_edit=True)

    if 'household_id' in fields:
        guest.household = _resolve_household(
            wedding_id=guest.wedding_id,
            household_id=fields.pop('household_id'),
        )

    for field, value in fields.items():
        setattr(guest, field, value)
    guest.save()
    return guest


@transaction.atomic
def delete_guest(*, guest_id: UUID, user: User) -> None:
    """Deleting a guest also deletes their invitations (cascade)."""
    guest = get_guest_for_user(guest_id=guest_id, user=user, require_edit=True)
    guest.delete()


def bulk_import_guests(*, wedding_id: UUID, user: User, rows: List[dict]) -> dict:
    """
    Create many guests at once, grouping them into households by name.

    Rows naming a household join the existing household with that name
    (case-insensitive) or a new one sized to the number of rows naming it.
    Each row is saved in its own savepoint, so one bad row does not stop
    the import.

    Args:
        wedding_id: UUID of the wedding
        user: Requesting user (must be able to edit)
        rows: Validated guest dicts, optionally with 'household_name'

    Returns:
        {'success': int, 'failed': int, 'guests': [Guest], 'errors': [dict]}
    """
    wedding = get_wedding_for_user(wedding_id=wedding_id, user=user, require_edit=True)

    households = {
        household.name.strip().lower(): household
        for household in Household.objects.filter(wedding=wedding)
    }
    rows_per_household = Counter(
        row['household_name'].strip().lower()
        for row in rows
        if (row.get('household_name') or '').strip()
    )

    created = []
    errors = []

    for index, row in enumerate(rows):
        data = dict(row)
        household_name = (data.pop('household_name', '') or '').strip()

        try:
            with transaction.atomic():
                household = None
                new_household = False
                if household_name:
                    key = household_name.lower()
                    household = households.get(key)
                    if household is None:
                        household = Household.objects.create(
                            wedding=wedding,
                            name=household_name,
                            affiliation=data.get('side') or 'mutual',
                            relationship_tier=RelationshipTier.FRIEND,
                            priority_tier=PriorityTier.NICE_TO_HAVE,
                            max_count=rows_per_household[key] or 1,
                        )
                        new_household = True

                created.append(
                    Guest.objects.create(wedding=wedding, household=household, **data)
                )
        except (IntegrityError, DatabaseError, ValueError, TypeError) as e:
            errors.append({'index': index, 'data': row, 'error': str(e)})
            continue

        # Only cache households whose savepoint committed
        if new_household:
            households[household_name.lower()] = household

    logger.info(
        "Bulk import for wedding %s: %d created, %d failed",
        wedding.id, len(created), len(errors),
    )

    return {
        'success': len(created),
        'failed': len(errors),
        'guests': created,
        'errors': errors,
    }
