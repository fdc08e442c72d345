from rest_framework import serializers
from .models import (
    Household,
    Guest,
    Invitation,
    HouseholdMergeAudit,
    Affiliation,
    RelationshipTier,
    RsvpStatus,
    MergeDecision,
)
from apps.accounts.serializers import UserMinimalSerializer


class GuestMinimalSerializer(serializers.ModelSerializer):
    """Guest info shown next to a duplicate candidate."""

    class Meta:
        model = Guest
        fields = ['id', 'name', 'email', 'phone', 'is_main_household_contact']
        read_only_fields = fields


class HouseholdSerializer(serializers.ModelSerializer):
    """Main serializer for households."""

    guest_count = serializers.SerializerMethodField()
    has_magic_link = serializers.SerializerMethodField()

    class Meta:
        model = Household
        fields = [
            'id',
            'wedding',
            'name',
            'contact_email',
            'max_count',
            'affiliation',
            'relationship_tier',
            'priority_tier',
            'guest_count',
            'has_magic_link',
            'magic_link_expires',
            'created_at',
        ]
        read_only_fields = ['id', 'wedding', 'magic_link_expires', 'created_at']

    def get_guest_count(self, obj):
        # Annotated on list querysets
        count = getattr(obj, 'guest_count', None)
        if count is None:
            count = obj.guests.count()
        return count

    def get_has_magic_link(self, obj):
        return bool(obj.magic_link_token_hash)


class HouseholdCreateSerializer(serializers.ModelSerializer):
    """Serializer for creating households."""

    wedding = serializers.UUIDField()

    class Meta:
        model = Household
        fields = [
            'wedding',
            'name',
            'contact_email',
            'max_count',
            'affiliation',
            'relationship_tier',
            'priority_tier',
        ]


class HouseholdUpdateSerializer(serializers.ModelSerializer):
    """Households cannot move between weddings."""

    class Meta:
        model = Household
        fields = [
            'name',
            'contact_email',
            'max_count',
            'affiliation',
            'relationship_tier',
            'priority_tier',
        ]


class HouseholdSummarySerializer(serializers.ModelSerializer):
    """Household side of a duplicate candidate."""

    class Meta:
        model = Household
        fields = [
            'id',
            'name',
            'contact_email',
            'max_count',
            'affiliation',
            'relationship_tier',
            'priority_tier',
            'created_at',
        ]
        read_only_fields = fields


class DuplicateCandidateSerializer(serializers.Serializer):
    """One entry of the duplicate review queue."""

    household1 = HouseholdSummarySerializer()
    household2 = HouseholdSummarySerializer()
    guests1 = GuestMinimalSerializer(many=True)
    guests2 = GuestMinimalSerializer(many=True)
    confidence = serializers.FloatField()
    matchReasons = serializers.ListField(child=serializers.CharField(), source='match_reasons')


class MergeRequestSerializer(serializers.Serializer):
    """Body of POST /api/households/merge/."""

    survivorId = serializers.UUIDField(source='survivor_id')
    mergedId = serializers.UUIDField(source='merged_id')
    decision = serializers.ChoiceField(choices=MergeDecision.choices)


class HouseholdMergeAuditSerializer(serializers.ModelSerializer):

    merged_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = HouseholdMergeAudit
        fields = [
            'id',
            'wedding',
            'survivor',
            'merged_household_id',
            'merged_household_name',
            'decision',
            'guests_reassigned',
            'guests_removed',
            'invitations_moved',
            'merged_by',
            'merged_at',
        ]
        read_only_fields = fields


class GuestSerializer(serializers.ModelSerializer):
    """Main serializer for guests."""

    household_name = serializers.CharField(source='household.name', read_only=True, default=None)

    class Meta:
        model = Guest
        fields = [
            'id',
            'wedding',
            'household',
            'household_name',
            'name',
            'email',
            'phone',
            'is_main_household_contact',
            'side',
            'relationship_tier',
            'plus_one',
            'dietary_restrictions',
            'rsvp_status',
            'created_at',
        ]
        read_only_fields = ['id', 'wedding', 'household', 'created_at']


class GuestWriteSerializer(serializers.ModelSerializer):
    """Serializer for creating and updating guests; household is given by id."""

    household = serializers.UUIDField(required=False, allow_null=True)

    class Meta:
        model = Guest
        fields = [
            'household',
            'name',
            'email',
            'phone',
            'is_main_household_contact',
            'side',
            'relationship_tier',
            'plus_one',
            'dietary_restrictions',
            'rsvp_status',
        ]


class GuestCreateSerializer(GuestWriteSerializer):

    wedding = serializers.UUIDField()

    class Meta(GuestWriteSerializer.Meta):
        fields = ['wedding'] + GuestWriteSerializer.Meta.fields


class GuestImportRowSerializer(serializers.Serializer):
    """One spreadsheet row."""

    name = serializers.CharField(max_length=200)
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=40, required=False, allow_blank=True)
    side = serializers.ChoiceField(choices=Affiliation.choices, required=False)
    relationship_tier = serializers.ChoiceField(
        choices=RelationshipTier.choices, required=False, allow_blank=True
    )
    plus_one = serializers.BooleanField(required=False)
    dietary_restrictions = serializers.CharField(max_length=255, required=False, allow_blank=True)
    is_main_household_contact = serializers.BooleanField(required=False)
    household_name = serializers.CharField(max_length=200, required=False, allow_blank=True)


class GuestImportSerializer(serializers.Serializer):
    """Body of the bulk import and import duplicate check endpoints."""

    wedding = serializers.UUIDField()
    guests = GuestImportRowSerializer(many=True, allow_empty=False)


class InvitationSerializer(serializers.ModelSerializer):

    guest_name = serializers.CharField(source='guest.name', read_only=True)
    event_name = serializers.CharField(source='event.name', read_only=True)

    class Meta:
        model = Invitation
        fields = [
            'id',
            'guest',
            'guest_name',
            'event',
            'event_name',
            'rsvp_status',
            'dietary_restrictions',
            'plus_one_attending',
            'invited_at',
            'responded_at',
        ]
        read_only_fields = fields


class InvitationCreateSerializer(serializers.Serializer):
    guest = serializers.UUIDField()
    event = serializers.UUIDField()
    dietary_restrictions = serializers.CharField(max_length=255, required=False, allow_blank=True)


class RsvpSerializer(serializers.Serializer):
    rsvp_status = serializers.ChoiceField(choices=RsvpStatus.choices)
    dietary_restrictions = serializers.CharField(max_length=255, required=False, allow_blank=True)
    plus_one_attending = serializers.BooleanField(required=False, allow_null=True)


class MagicLinkHouseholdSerializer(serializers.ModelSerializer):
    """What a guest sees after opening their RSVP link."""

    couple_name = serializers.CharField(source='wedding.couple_name', read_only=True)
    guests = GuestMinimalSerializer(many=True, read_only=True)

    class Meta:
        model = Household
        fields = ['id', 'name', 'couple_name', 'max_count', 'guests']
        read_only_fields = fields
