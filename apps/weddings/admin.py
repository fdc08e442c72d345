from django.contrib import admin
from apps.weddings.models import Wedding, WeddingRole, Event


class WeddingRoleInline(admin.TabularInline):
    """Inline admin for collaborators."""
    model = WeddingRole
    extra = 0
    fields = ['user', 'role', 'joined_at']
    readonly_fields = ['joined_at']


class EventInline(admin.TabularInline):
    model = Event
    extra = 0
    fields = ['name', 'date', 'location', 'order']


@admin.register(Wedding)
class WeddingAdmin(admin.ModelAdmin):
    """Admin interface for Weddings."""

    list_display = [
        'couple_name',
        'owner',
        'date',
        'location',
        'household_count',
        'created_at',
    ]
    list_filter = ['date', 'created_at']
    search_fields = ['partner1_name', 'partner2_name', 'owner__email', 'location']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [WeddingRoleInline, EventInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Couple', {
            'fields': ('owner', 'partner1_name', 'partner2_name')
        }),
        ('Details', {
            'fields': ('date', 'location', 'guest_count_estimate', 'budget')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def household_count(self, obj):
        return obj.households.count()
    household_count.short_description = 'Households'


@admin.register(WeddingRole)
class WeddingRoleAdmin(admin.ModelAdmin):
    list_display = ['user', 'wedding', 'role', 'joined_at']
    list_filter = ['role', 'joined_at']
    search_fields = ['user__email', 'wedding__partner1_name', 'wedding__partner2_name']
    readonly_fields = ['joined_at']
    ordering = ['-joined_at']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user', 'wedding')


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ['name', 'wedding', 'date', 'location', 'order']
    list_filter = ['date']
    search_fields = ['name', 'wedding__partner1_name', 'wedding__partner2_name']
    ordering = ['wedding', 'order']
