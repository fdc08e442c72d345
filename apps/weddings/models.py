from django.db import models
from decimal import Decimal
import uuid


class WeddingRoleType(models.TextChoices):
    OWNER = 'owner', 'Owner'
    PLANNER = 'planner', 'Planner'
    VIEWER = 'viewer', 'Viewer'


EDIT_ROLES = [WeddingRoleType.OWNER, WeddingRoleType.PLANNER]


class Wedding(models.Model):
    """A couple's wedding. Every guest-list row hangs off one of these."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='owned_weddings')
    partner1_name = models.CharField(max_length=120)
    partner2_name = models.CharField(max_length=120, blank=True)
    date = models.DateField(null=True, blank=True)
    location = models.CharField(max_length=255, blank=True)
    guest_count_estimate = models.PositiveIntegerField(null=True, blank=True)
    budget = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'weddings'
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='weddings_owner_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.couple_name

    @property
    def couple_name(self):
        if self.partner1_name and self.partner2_name:
            return f"{self.partner1_name} & {self.partner2_name}"
        return self.partner1_name or self.partner2_name or 'The Couple'

    def get_user_role(self, user):
        if user is None or not user.is_authenticated:
            return None
        if self.owner_id == user.id:
            return WeddingRoleType.OWNER
        try:
            return self.roles.get(user=user).role
        except WeddingRole.DoesNotExist:
            return None

    def has_access(self, user):
        return self.get_user_role(user) is not None

    def can_edit(self, user):
        return self.get_user_role(user) in EDIT_ROLES


class WeddingRole(models.Model):
    """Collaborator on a wedding (the couple, a planner, or a read-only family member)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='wedding_roles')
    wedding = models.ForeignKey(Wedding, on_delete=models.CASCADE, related_name='roles')
    role = models.CharField(max_length=20, choices=WeddingRoleType.choices, default=WeddingRoleType.VIEWER)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'wedding_roles'
        unique_together = [['user', 'wedding']]
        ordering = ['joined_at']

    def __str__(self):
        return f"{self.user.get_display_name()} on {self.wedding} ({self.role})"

    def save(self, *args, **kwargs):
        if self.wedding.owner_id == self.user_id:
            self.role = WeddingRoleType.OWNER
        super().save(*args, **kwargs)


class Event(models.Model):
    """One function of a wedding (Mehndi, Sangeet, Ceremony, Reception...)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    wedding = models.ForeignKey(Wedding, on_delete=models.CASCADE, related_name='events')
    name = models.CharField(max_length=200)
    date = models.DateTimeField(null=True, blank=True)
    location = models.CharField(max_length=255, blank=True)
    order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'events'
        ordering = ['order', 'date']

    def __str__(self):
        return f"{self.name} ({self.wedding})"
