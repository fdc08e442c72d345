import logging
import uuid

from django.db import DatabaseError
from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import Invitation
from .serializers import (
    HouseholdSerializer,
    HouseholdCreateSerializer,
    HouseholdUpdateSerializer,
    HouseholdMergeAuditSerializer,
    MergeRequestSerializer,
    MagicLinkHouseholdSerializer,
    GuestSerializer,
    GuestCreateSerializer,
    GuestWriteSerializer,
    GuestImportSerializer,
    InvitationSerializer,
    InvitationCreateSerializer,
    RsvpSerializer,
)

from apps.guests.services import (
    get_household_for_user,
    get_wedding_households,
    create_household,
    update_household,
    delete_household,
    generate_magic_token,
    revoke_magic_token,
    get_household_by_magic_token,
    build_magic_link,
    merge_households,
    get_guest_for_user,
    get_wedding_guests,
    create_guest,
    update_guest,
    delete_guest,
    bulk_import_guests,
    check_import_duplicates,
    create_invitation,
    update_rsvp,
    delete_invitation,
    # Exceptions
    HouseholdNotFoundError,
    GuestNotFoundError,
    InvalidHouseholdError,
    InvalidMergeError,
    InvitationNotFoundError,
    InvalidInvitationError,
    DuplicateInvitationError,
    InvalidMagicLinkError,
    MagicLinkExpiredError,
)
from apps.weddings.services import (
    get_user_weddings,
    WeddingNotFoundError,
    WeddingAccessDeniedError,
    EventNotFoundError,
)

logger = logging.getLogger(__name__)


WEDDING_PARAMETER = OpenApiParameter('wedding', str, required=True, description='Wedding ID')


def _wedding_param_missing():
    return Response(
        {'error': 'wedding query parameter is required'},
        status=status.HTTP_400_BAD_REQUEST
    )


class HouseholdViewSet(viewsets.ViewSet):
    """
    Households of a wedding.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Households of ?wedding=<id> with guest counts
    create / retrieve / partial_update / destroy: Household CRUD
    merge: Resolve a duplicate pair
    generate_token / revoke_token: RSVP magic links
    by_token: Public lookup for a magic link
    """

    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.action == 'by_token':
            return [AllowAny()]
        return [IsAuthenticated()]

    @extend_schema(parameters=[WEDDING_PARAMETER], responses={200: HouseholdSerializer(many=True)})
    def list(self, request):
        wedding_id = request.query_params.get('wedding')
        if not wedding_id:
            return _wedding_param_missing()

        try:
            households = get_wedding_households(wedding_id=wedding_id, user=request.user)
        except WeddingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(HouseholdSerializer(households, many=True).data)

    @extend_schema(request=HouseholdCreateSerializer, responses={201: HouseholdSerializer})
    def create(self, request):
        serializer = HouseholdCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        wedding_id = data.pop('wedding')

        try:
            household = create_household(wedding_id=wedding_id, user=request.user, **data)
        except WeddingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(HouseholdSerializer(household).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: HouseholdSerializer})
    def retrieve(self, request, pk=None):
        try:
            household = get_household_for_user(household_id=pk, user=request.user)
        except HouseholdNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(HouseholdSerializer(household).data)

    @extend_schema(request=HouseholdUpdateSerializer, responses={200: HouseholdSerializer})
    def partial_update(self, request, pk=None):
        serializer = HouseholdUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            household = update_household(
                household_id=pk,
                user=request.user,
                **serializer.validated_data
            )
        except HouseholdNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(HouseholdSerializer(household).data)

    def destroy(self, request, pk=None):
        try:
            delete_household(household_id=pk, user=request.user)
        except HouseholdNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=MergeRequestSerializer, responses={200: HouseholdMergeAuditSerializer})
    @action(detail=False, methods=['post'])
    def merge(self, request):
        """
        Merge a duplicate household into the one the couple kept.

        Body: {survivorId, mergedId, decision}
        """
        serializer = MergeRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            audit = merge_households(
                survivor_id=serializer.validated_data['survivor_id'],
                merged_id=serializer.validated_data['merged_id'],
                decision=serializer.validated_data['decision'],
                merged_by=request.user
            )
        except InvalidMergeError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except (HouseholdNotFoundError, WeddingNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except DatabaseError:
            logger.exception(
                "Household merge failed: survivor=%s merged=%s",
                serializer.validated_data['survivor_id'],
                serializer.validated_data['merged_id'],
            )
            return Response(
                {'error': 'Failed to merge households'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response({
            'success': True,
            'audit': HouseholdMergeAuditSerializer(audit).data,
        })

    @action(detail=True, methods=['post'], url_path='generate-token')
    def generate_token(self, request, pk=None):
        """Issue a new RSVP link for the household. The token is shown once."""
        try:
            token, household = generate_magic_token(household_id=pk, user=request.user)
        except HouseholdNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response({
            'token': token,
            'magic_link': build_magic_link(token),
            'expires_at': household.magic_link_expires,
        })

    @action(detail=True, methods=['post'], url_path='revoke-token')
    def revoke_token(self, request, pk=None):
        try:
            revoke_magic_token(household_id=pk, user=request.user)
        except HouseholdNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: MagicLinkHouseholdSerializer})
    @action(detail=False, methods=['get'], url_path=r'by-token/(?P<token>[0-9a-f]+)')
    def by_token(self, request, token=None):
        """Household behind an RSVP link (no login required)."""
        try:
            household = get_household_by_magic_token(token=token)
        except InvalidMagicLinkError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except MagicLinkExpiredError as e:
            return Response({'error': str(e)}, status=status.HTTP_410_GONE)

        return Response(MagicLinkHouseholdSerializer(household).data)


class GuestViewSet(viewsets.ViewSet):
    """
    Guests of a wedding.

    list: Guests of ?wedding=<id>, optionally &household=<id>
    bulk: Spreadsheet import
    check_duplicates: Compare import rows with the existing list before importing
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        parameters=[
            WEDDING_PARAMETER,
            OpenApiParameter('household', str, required=False, description='Household ID'),
        ],
        responses={200: GuestSerializer(many=True)},
    )
    def list(self, request):
        wedding_id = request.query_params.get('wedding')
        if not wedding_id:
            return _wedding_param_missing()

        try:
            guests = get_wedding_guests(
                wedding_id=wedding_id,
                user=request.user,
                household_id=request.query_params.get('household')
            )
        except WeddingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(GuestSerializer(guests, many=True).data)

    @extend_schema(request=GuestCreateSerializer, responses={201: GuestSerializer})
    def create(self, request):
        serializer = GuestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        wedding_id = data.pop('wedding')
        household_id = data.pop('household', None)

        try:
            guest = create_guest(
                wedding_id=wedding_id,
                user=request.user,
                household_id=household_id,
                **data
            )
        except (WeddingNotFoundError, HouseholdNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except InvalidHouseholdError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(GuestSerializer(guest).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: GuestSerializer})
    def retrieve(self, request, pk=None):
        try:
            guest = get_guest_for_user(guest_id=pk, user=request.user)
        except GuestNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(GuestSerializer(guest).data)

    @extend_schema(request=GuestWriteSerializer, responses={200: GuestSerializer})
    def partial_update(self, request, pk=None):
        serializer = GuestWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        if 'household' in data:
            data['household_id'] = data.pop('household')

        try:
            guest = update_guest(guest_id=pk, user=request.user, **data)
        except (GuestNotFoundError, HouseholdNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except InvalidHouseholdError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(GuestSerializer(guest).data)

    def destroy(self, request, pk=None):
        try:
            delete_guest(guest_id=pk, user=request.user)
        except GuestNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=GuestImportSerializer)
    @action(detail=False, methods=['post'])
    def bulk(self, request):
        """Import guests; rows that fail are reported, the rest are saved."""
        serializer = GuestImportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = bulk_import_guests(
                wedding_id=serializer.validated_data['wedding'],
                user=request.user,
                rows=serializer.validated_data['guests']
            )
        except WeddingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response({
            'success': result['success'],
            'failed': result['failed'],
            'guests': GuestSerializer(result['guests'], many=True).data,
            'errors': result['errors'],
        }, status=status.HTTP_201_CREATED)

    @extend_schema(request=GuestImportSerializer)
    @action(detail=False, methods=['post'], url_path='check-duplicates')
    def check_duplicates(self, request):
        serializer = GuestImportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = check_import_duplicates(
                wedding_id=serializer.validated_data['wedding'],
                user=request.user,
                rows=serializer.validated_data['guests']
            )
        except WeddingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(result)


class InvitationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Per-event invitations.

    list: Invitations of ?wedding=<id>
    create: Invite a guest to an event
    rsvp: Record the guest's answer
    destroy: Withdraw the invitation
    """

    serializer_class = InvitationSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        queryset = Invitation.objects.filter(
            guest__wedding__in=get_user_weddings(user=self.request.user).values('id')
        ).select_related('guest', 'event')

        wedding_id = self.request.query_params.get('wedding')
        if wedding_id:
            queryset = queryset.filter(guest__wedding_id=wedding_id)
        return queryset

    @extend_schema(parameters=[WEDDING_PARAMETER])
    def list(self, request, *args, **kwargs):
        wedding_id = request.query_params.get('wedding')
        if not wedding_id:
            return _wedding_param_missing()
        try:
            uuid.UUID(wedding_id)
        except ValueError:
            return Response({'error': 'Wedding not found'}, status=status.HTTP_404_NOT_FOUND)
        return super().list(request, *args, **kwargs)

    @extend_schema(request=InvitationCreateSerializer, responses={201: InvitationSerializer})
    def create(self, request):
        serializer = InvitationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)

        try:
            invitation = create_invitation(
                guest_id=data.pop('guest'),
                event_id=data.pop('event'),
                user=request.user,
                **data
            )
        except (GuestNotFoundError, EventNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (InvalidInvitationError, DuplicateInvitationError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(InvitationSerializer(invitation).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=RsvpSerializer, responses={200: InvitationSerializer})
    @action(detail=True, methods=['patch'])
    def rsvp(self, request, pk=None):
        serializer = RsvpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            invitation = update_rsvp(
                invitation_id=pk,
                user=request.user,
                **serializer.validated_data
            )
        except InvitationNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(InvitationSerializer(invitation).data)

    def destroy(self, request, pk=None):
        try:
            delete_invitation(invitation_id=pk, user=request.user)
        except InvitationNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(status=status.HTTP_204_NO_CONTENT)
