"""Invitation management service (per-event RSVPs)."""

from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.accounts.models import User
from apps.weddings.services import get_wedding_for_user, get_event_for_user

from ..models import Invitation, RsvpStatus
from .exceptions import (
    InvalidInvitationError,
    DuplicateInvitationError,
    InvitationNotFoundError,
)
from .guest_management import get_guest_for_user


@transaction.atomic
def create_invitation(*, guest_id: UUID, event_id: UUID, user: User, **fields) -> Invitation:
    """
    Invite a guest to one event.

    Raises:
        GuestNotFoundError / EventNotFoundError: If either doesn't exist
        WeddingAccessDeniedError: If user cannot edit the wedding
        InvalidInvitationError: If guest and event belong to different weddings
        DuplicateInvitationError: If the guest is already invited
    """
    guest = get_guest_for_user(guest_id=guest_id, user=user, require_edit=True)
    event = get_event_for_user(event_id=event_id, user=user, require_edit=True)

    if guest.wedding_id != event.wedding_id:
        raise InvalidInvitationError("Guest and event belong to different weddings")

    try:
        with transaction.atomic():
            return Invitation.objects.create(guest=guest, event=event, **fields)
    except IntegrityError:
        raise DuplicateInvitationError(f"{guest.name} is already invited to {event.name}")


def get_invitation_for_user(
    *,
    invitation_id: UUID,
    user: User,
    require_edit: bool = False
) -> Invitation:
    try:
        invitation = (
            Invitation.objects
            .select_related('guest', 'event')
            .get(id=invitation_id)
        )
    except (Invitation.DoesNotExist, ValidationError):
        raise InvitationNotFoundError(f"Invitation with ID {invitation_id} not found")

    get_wedding_for_user(
        wedding_id=invitation.guest.wedding_id,
        user=user,
        require_edit=require_edit,
    )
    return invitation


@transaction.atomic
def update_rsvp(
    *,
    invitation_id: UUID,
    user: User,
    rsvp_status: str,
    dietary_restrictions: Optional[str] = None,
    plus_one_attending: Optional[bool] = None
) -> Invitation:
    """Record an RSVP answer; responded_at is cleared when reset to pending."""
    get_invitation_for_user(invitation_id=invitation_id, user=user, require_edit=True)

    invitation = Invitation.objects.select_for_update().get(id=invitation_id)
    invitation.rsvp_status = rsvp_status
    invitation.responded_at = None if rsvp_status == RsvpStatus.PENDING else timezone.now()
    if dietary_restrictions is not None:
        invitation.dietary_restrictions = dietary_restrictions
    if plus_one_attending is not None:
        invitation.plus_one_attending = plus_one_attending
    invitation.save()

    return invitation


@transaction.atomic
def delete_invitation(*, invitation_id: UUID, user: User) -> None:
    invitation = get_invitation_for_user(invitation_id=invitation_id, user=user, require_edit=True)
    invitation.delete()
