"""Household merging service with full transaction safety."""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.accounts.models import User
from apps.weddings.services import get_wedding_for_user

from ..models import (
    Household,
    HouseholdMergeAudit,
    Invitation,
    MergeDecision,
    normalize_name,
)
from .exceptions import InvalidMergeError, HouseholdNotFoundError

logger = logging.getLogger(__name__)


@transaction.atomic
def merge_households(
    *,
    survivor_id: UUID,
    merged_id: UUID,
    decision: str,
    merged_by: User
) -> HouseholdMergeAudit:
    """
    Merge a duplicate household into the one the couple chose to keep.

    Process:
    1. Lock both households
    2. Check the user can edit the wedding both households belong to
    3. Reassign the merged household's guests to the survivor; a guest whose
       name matches a survivor guest is the same person and is removed, with
       its invitations moved to the survivor's guest
    4. Delete the merged household
    5. Create merge audit record

    Either everything happens or nothing does. A second merge of the same
    household finds nothing to lock and fails with HouseholdNotFoundError.

    Args:
        survivor_id: Household to keep
        merged_id: Household to merge away (will be deleted)
        decision: 'kept_older' or 'kept_newer' (recorded only)
        merged_by: User performing the merge

    Returns:
        HouseholdMergeAudit record

    Raises:
        InvalidMergeError: If parameters are invalid or weddings differ
        HouseholdNotFoundError: If either household doesn't exist
        WeddingAccessDeniedError: If user cannot edit the wedding
    """
    if decision not in MergeDecision.values:
        raise InvalidMergeError("Decision must be 'kept_older' or 'kept_newer'")

    if str(survivor_id) == str(merged_id):
        raise InvalidMergeError("Cannot merge household with itself")

    # Lock in a stable order so two merges over the same pair cannot deadlock
    try:
        locked = {
            str(household.id): household
            for household in (
                Household.objects
                .select_for_update()
                .filter(id__in=[survivor_id, merged_id])
                .order_by('id')
            )
        }
    except ValidationError:
        raise HouseholdNotFoundError("Invalid household ID")

    survivor = locked.get(str(survivor_id))
    if survivor is None:
        raise HouseholdNotFoundError(f"Survivor household {survivor_id} not found")

    merged = locked.get(str(merged_id))
    if merged is None:
        raise HouseholdNotFoundError(f"Merged household {merged_id} not found")

    get_wedding_for_user(wedding_id=survivor.wedding_id, user=merged_by, require_edit=True)
    if merged.wedding_id != survivor.wedding_id:
        get_wedding_for_user(wedding_id=merged.wedding_id, user=merged_by, require_edit=True)
        raise InvalidMergeError("Households belong to different weddings")

    survivor_guests = list(survivor.guests.select_for_update().order_by('created_at', 'id'))

    # Only guests the survivor already had can absorb a merged guest; the
    # earliest one wins when the survivor lists the same name twice
    survivor_by_name = {}
    for guest in survivor_guests:
        survivor_by_name.setdefault(normalize_name(guest.name), guest)
    survivor_has_contact = any(guest.is_main_household_contact for guest in survivor_guests)

    guests_reassigned = 0
    guests_removed = 0
    invitations_moved = 0

    # Step 1: Move guests (handle duplicates)
    for guest in merged.guests.select_for_update().order_by('created_at', 'id'):
        match = survivor_by_name.get(normalize_name(guest.name))

        if match is None:
            guest.household = survivor
            if survivor_has_contact:
                guest.is_main_household_contact = False
            guest.save(update_fields=['household', 'is_main_household_contact'])
            survivor_has_contact = survivor_has_contact or guest.is_main_household_contact
            guests_reassigned += 1
            continue

        # Same person on both lists: keep the survivor's row, fill its gaps
        updated_fields = []
        for field in ('email', 'phone', 'dietary_restrictions'):
            if getattr(guest, field) and not getattr(match, field):
                setattr(match, field, getattr(guest, field))
                updated_fields.append(field)
        if updated_fields:
            match.save(update_fields=updated_fields)

        # Step 2: Move invitations, dropping ones the survivor already has
        for invitation in Invitation.objects.select_for_update().filter(guest=guest):
            if Invitation.objects.filter(guest=match, event_id=invitation.event_id).exists():
                invitation.delete()
            else:
                invitation.guest = match
                invitation.save(update_fields=['guest'])
                invitations_moved += 1

        guest.delete()
        guests_removed += 1

    # Step 3: Grow the survivor to seat everyone it took over
    survivor_update = ['max_count']
    survivor.max_count += guests_reassigned
    if not survivor.contact_email and merged.contact_email:
        survivor.contact_email = merged.contact_email
        survivor_update.append('contact_email')
    survivor.save(update_fields=survivor_update)

    # Step 4: Create merge history before the row goes away
    audit = HouseholdMergeAudit.objects.create(
        wedding_id=survivor.wedding_id,
        survivor=survivor,
        merged_household_id=merged.id,
        merged_household_name=merged.name,
        decision=decision,
        guests_reassigned=guests_reassigned,
        guests_removed=guests_removed,
        invitations_moved=invitations_moved,
        merged_by=merged_by,
    )

    # Step 5: Delete merged household (no guests reference it any more)
    merged.delete()

    logger.info(
        "Merged household %s into %s (%s): %d reassigned, %d removed",
        merged_id, survivor.id, decision, guests_reassigned, guests_removed,
    )

    return audit
