from django.db import models
import hashlib
import re
import uuid


class Affiliation(models.TextChoices):
    BRIDE = 'bride', 'Bride'
    GROOM = 'groom', 'Groom'
    MUTUAL = 'mutual', 'Mutual'


class RelationshipTier(models.TextChoices):
    IMMEDIATE_FAMILY = 'immediate_family', 'Immediate family'
    EXTENDED_FAMILY = 'extended_family', 'Extended family'
    FRIEND = 'friend', 'Friend'
    PARENTS_FRIEND = 'parents_friend', "Parents' friend"


class PriorityTier(models.TextChoices):
    MUST_INVITE = 'must_invite', 'Must invite'
    SHOULD_INVITE = 'should_invite', 'Should invite'
    NICE_TO_HAVE = 'nice_to_have', 'Nice to have'


class RsvpStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ATTENDING = 'attending', 'Attending'
    NOT_ATTENDING = 'not_attending', 'Not attending'


class MergeDecision(models.TextChoices):
    KEPT_OLDER = 'kept_older', 'Kept older'
    KEPT_NEWER = 'kept_newer', 'Kept newer'


def normalize_name(text):
    text = (text or '').lower().strip()
    text = re.sub(r'\s+', ' ', text)
    text = re.sub(r'[^\w\s-]', '', text)
    return text


class Household(models.Model):
    """A family or unit invited together; RSVPs are answered per household."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    wedding = models.ForeignKey('weddings.Wedding', on_delete=models.CASCADE, related_name='households')
    name = models.CharField(max_length=200)
    name_normalized = models.CharField(max_length=200, db_index=True, editable=False)
    contact_email = models.EmailField(blank=True)
    max_count = models.PositiveIntegerField(default=1)
    affiliation = models.CharField(max_length=20, choices=Affiliation.choices, default=Affiliation.BRIDE)
    relationship_tier = models.CharField(max_length=30, choices=RelationshipTier.choices, default=RelationshipTier.FRIEND)
    priority_tier = models.CharField(max_length=20, choices=PriorityTier.choices, default=PriorityTier.SHOULD_INVITE)
    magic_link_token_hash = models.CharField(max_length=64, unique=True, null=True, blank=True, editable=False)
    magic_link_expires = models.DateTimeField(null=True, blank=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'households'
        indexes = [
            models.Index(fields=['wedding', 'created_at'], name='households_wedding_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.name_normalized = normalize_name(self.name)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'name' in update_fields:
            kwargs['update_fields'] = set(update_fields) | {'name_normalized'}
        super().save(*args, **kwargs)

    @staticmethod
    def hash_token(token):
        return hashlib.sha256(token.encode('utf-8')).hexdigest()

    def get_main_contact(self):
        """Flagged main contact, else the first guest."""
        guests = list(self.guests.all())
        for guest in guests:
            if guest.is_main_household_contact:
                return guest
        return guests[0] if guests else None


class Guest(models.Model):
    """One invited person."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    wedding = models.ForeignKey('weddings.Wedding', on_delete=models.CASCADE, related_name='guests')
    household = models.ForeignKey(Household, on_delete=models.CASCADE, null=True, blank=True, related_name='guests')
    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=40, blank=True)
    is_main_household_contact = models.BooleanField(default=False)
    side = models.CharField(max_length=20, choices=Affiliation.choices, default=Affiliation.MUTUAL)
    relationship_tier = models.CharField(max_length=30, choices=RelationshipTier.choices, blank=True)
    plus_one = models.BooleanField(default=False)
    dietary_restrictions = models.CharField(max_length=255, blank=True)
    rsvp_status = models.CharField(max_length=20, choices=RsvpStatus.choices, default=RsvpStatus.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'guests'
        indexes = [
            models.Index(fields=['wedding', 'household'], name='guests_wedding_household_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return self.name


class Invitation(models.Model):
    """A guest's invitation to one event, carrying that event's RSVP."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    guest = models.ForeignKey(Guest, on_delete=models.CASCADE, related_name='invitations')
    event = models.ForeignKey('weddings.Event', on_delete=models.CASCADE, related_name='invitations')
    rsvp_status = models.CharField(max_length=20, choices=RsvpStatus.choices, default=RsvpStatus.PENDING)
    dietary_restrictions = models.CharField(max_length=255, blank=True)
    plus_one_attending = models.BooleanField(null=True, blank=True)
    invited_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'invitations'
        unique_together = [['guest', 'event']]
        ordering = ['invited_at']

    def __str__(self):
        return f"{self.guest.name} - {self.event.name} ({self.rsvp_status})"


class HouseholdMergeAudit(models.Model):
    """Record of a duplicate household merge. The merged household no longer exists."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    wedding = models.ForeignKey('weddings.Wedding', on_delete=models.CASCADE, related_name='household_merges')
    survivor = models.ForeignKey(Household, on_delete=models.SET_NULL, null=True, related_name='merge_audits')
    merged_household_id = models.UUIDField(db_index=True)
    merged_household_name = models.CharField(max_length=200)
    decision = models.CharField(max_length=20, choices=MergeDecision.choices)
    guests_reassigned = models.PositiveIntegerField(default=0)
    guests_removed = models.PositiveIntegerField(default=0)
    invitations_moved = models.PositiveIntegerField(default=0)
    merged_by = models.ForeignKey('accounts.User', on_delete=models.SET_NULL, null=True, related_name='household_merges')
    merged_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'household_merge_audits'
        ordering = ['-merged_at']

    def __str__(self):
        return f"{self.merged_household_name} -> {self.survivor_id} ({self.decision})"
