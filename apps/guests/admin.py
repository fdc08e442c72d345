from django.contrib import admin
from apps.guests.models import Household, Guest, Invitation, HouseholdMergeAudit


class GuestInline(admin.TabularInline):
    """Inline admin for household members."""
    model = Guest
    extra = 0
    fields = ['name', 'email', 'phone', 'is_main_household_contact', 'rsvp_status']


class InvitationInline(admin.TabularInline):
    model = Invitation
    extra = 0
    fields = ['event', 'rsvp_status', 'responded_at']
    readonly_fields = ['responded_at']


@admin.register(Household)
class HouseholdAdmin(admin.ModelAdmin):
    """Admin interface for Households."""

    list_display = [
        'name',
        'wedding',
        'max_count',
        'guest_count',
        'affiliation',
        'priority_tier',
        'created_at',
    ]
    list_filter = ['affiliation', 'relationship_tier', 'priority_tier', 'created_at']
    search_fields = ['name', 'contact_email', 'wedding__partner1_name', 'wedding__partner2_name']
    readonly_fields = ['name_normalized', 'magic_link_expires', 'created_at']
    inlines = [GuestInline]
    ordering = ['-created_at']

    def guest_count(self, obj):
        return obj.guests.count()
    guest_count.short_description = 'Guests'

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('wedding')


@admin.register(Guest)
class GuestAdmin(admin.ModelAdmin):
    list_display = ['name', 'household', 'wedding', 'email', 'phone', 'side', 'rsvp_status']
    list_filter = ['side', 'rsvp_status', 'plus_one']
    search_fields = ['name', 'email', 'phone', 'household__name']
    readonly_fields = ['created_at']
    inlines = [InvitationInline]

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('household', 'wedding')


@admin.register(Invitation)
class InvitationAdmin(admin.ModelAdmin):
    list_display = ['guest', 'event', 'rsvp_status', 'invited_at', 'responded_at']
    list_filter = ['rsvp_status', 'invited_at']
    search_fields = ['guest__name', 'event__name']
    readonly_fields = ['invited_at', 'responded_at']
    date_hierarchy = 'invited_at'

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('guest', 'event')


@admin.register(HouseholdMergeAudit)
class HouseholdMergeAuditAdmin(admin.ModelAdmin):
    """Read-only history of household merges."""

    list_display = [
        'merged_household_name',
        'survivor',
        'decision',
        'guests_reassigned',
        'guests_removed',
        'merged_by',
        'merged_at',
    ]
    list_filter = ['decision', 'merged_at']
    search_fields = ['merged_household_name', 'survivor__name', 'merged_by__email']
    date_hierarchy = 'merged_at'
    ordering = ['-merged_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
