"""Event management service (the functions making up one wedding)."""

from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.accounts.models import User
from apps.weddings.models import Event

from .exceptions import EventNotFoundError
from .wedding_management import get_wedding_for_user


def create_event(*, wedding_id: UUID, user: User, name: str, **fields) -> Event:
    """
    Raises:
        WeddingNotFoundError: If wedding doesn't exist
        WeddingAccessDeniedError: If user cannot edit the wedding
    """
    wedding = get_wedding_for_user(wedding_id=wedding_id, user=user, require_edit=True)
    return Event.objects.create(wedding=wedding, name=name, **fields)


def get_event_for_user(*, event_id: UUID, user: User, require_edit: bool = False) -> Event:
    """
    Raises:
        EventNotFoundError: If event doesn't exist
        WeddingAccessDeniedError: If user lacks the role on the event's wedding
    """
    try:
        event = Event.objects.select_related('wedding').get(id=event_id)
    except (Event.DoesNotExist, ValidationError):
        raise EventNotFoundError(f"Event with ID {event_id} not found")

    get_wedding_for_user(wedding_id=event.wedding_id, user=user, require_edit=require_edit)
    return event


@transaction.atomic
def update_event(*, event_id: UUID, user: User, **fields) -> Event:
    event = get_event_for_user(event_id=event_id, user=user, require_edit=True)
    for field, value in fields.items():
        setattr(event, field, value)
    event.save()
    return event


@transaction.atomic
def delete_event(*, event_id: UUID, user: User) -> None:
    """Deleting an event also deletes its invitations (cascade)."""
    event = get_event_for_user(event_id=event_id, user=user, require_edit=True)
    event.delete()
