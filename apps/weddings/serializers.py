from rest_framework import serializers
from .models import Wedding, WeddingRole, WeddingRoleType, Event
from apps.accounts.serializers import UserMinimalSerializer


class WeddingSerializer(serializers.ModelSerializer):
    """Main serializer for weddings."""

    owner = UserMinimalSerializer(read_only=True)
    couple_name = serializers.CharField(read_only=True)
    user_role = serializers.SerializerMethodField()

    class Meta:
        model = Wedding
        fields = [
            'id',
            'owner',
            'partner1_name',
            'partner2_name',
            'couple_name',
            'date',
            'location',
            'guest_count_estimate',
            'budget',
            'user_role',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'owner', 'created_at', 'updated_at']

    def get_user_role(self, obj):
        """Current user's role on the wedding."""
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.get_user_role(request.user)
        return None


class WeddingCreateSerializer(serializers.ModelSerializer):
    """Serializer for creating and updating weddings."""

    class Meta:
        model = Wedding
        fields = [
            'partner1_name',
            'partner2_name',
            'date',
            'location',
            'guest_count_estimate',
            'budget',
        ]


class WeddingListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    couple_name = serializers.CharField(read_only=True)

    class Meta:
        model = Wedding
        fields = ['id', 'couple_name', 'date', 'location', 'created_at']
        read_only_fields = fields


class CollaboratorSerializer(serializers.ModelSerializer):
    """A user's role on a wedding."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = WeddingRole
        fields = ['id', 'user', 'role', 'joined_at']
        read_only_fields = fields


class AddCollaboratorSerializer(serializers.Serializer):
    email = serializers.EmailField()
    role = serializers.ChoiceField(
        choices=[WeddingRoleType.PLANNER, WeddingRoleType.VIEWER],
        default=WeddingRoleType.VIEWER,
    )


class EventSerializer(serializers.ModelSerializer):

    class Meta:
        model = Event
        fields = ['id', 'wedding', 'name', 'date', 'location', 'order', 'created_at']
        read_only_fields = ['id', 'created_at']


class EventUpdateSerializer(serializers.ModelSerializer):
    """Events cannot move between weddings."""

    class Meta:
        model = Event
        fields = ['name', 'date', 'location', 'order']
