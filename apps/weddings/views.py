import uuid

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import Event
from .serializers import (
    WeddingSerializer,
    WeddingCreateSerializer,
    WeddingListSerializer,
    CollaboratorSerializer,
    AddCollaboratorSerializer,
    EventSerializer,
    EventUpdateSerializer,
)

from apps.weddings.services import (
    create_wedding,
    get_user_weddings,
    update_wedding,
    delete_wedding,
    add_collaborator,
    remove_collaborator,
    get_collaborators,
    create_event,
    get_event_for_user,
    update_event,
    delete_event,
    # Exceptions
    WeddingNotFoundError,
    WeddingAccessDeniedError,
    AlreadyCollaboratorError,
    NotCollaboratorError,
    CannotRemoveOwnerError,
    UserNotFoundError,
    EventNotFoundError,
)
from apps.guests.serializers import DuplicateCandidateSerializer
from apps.guests.services import find_duplicate_households


class WeddingPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class WeddingViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Wedding CRUD operations.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Weddings the user owns or collaborates on
    create: Create a wedding (caller becomes owner)
    retrieve: Get a wedding
    update / partial_update: Edit details (owner or planner)
    destroy: Delete the wedding (owner only)
    """

    serializer_class = WeddingSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = WeddingPagination

    def get_queryset(self):
        """Return only weddings the user has a role on."""
        return get_user_weddings(user=self.request.user)

    def get_serializer_class(self):
        if self.action == 'list':
            return WeddingListSerializer
        elif self.action in ['create', 'update', 'partial_update']:
            return WeddingCreateSerializer
        return WeddingSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        wedding = create_wedding(owner=request.user, **serializer.validated_data)

        output_serializer = WeddingSerializer(wedding, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            wedding = update_wedding(
                wedding_id=self.kwargs['pk'],
                user=request.user,
                **serializer.validated_data
            )
        except WeddingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        output_serializer = WeddingSerializer(wedding, context={'request': request})
        return Response(output_serializer.data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_wedding(wedding_id=self.kwargs['pk'], user=request.user)
        except WeddingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=AddCollaboratorSerializer, responses={200: CollaboratorSerializer(many=True)})
    @action(detail=True, methods=['get', 'post'])
    def collaborators(self, request, pk=None):
        """List collaborators, or add one by email."""
        if request.method == 'GET':
            try:
                roles = get_collaborators(wedding_id=pk, user=request.user)
            except WeddingNotFoundError as e:
                return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
            except WeddingAccessDeniedError as e:
                return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
            return Response(CollaboratorSerializer(roles, many=True).data)

        serializer = AddCollaboratorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            role = add_collaborator(
                wedding_id=pk,
                email=serializer.validated_data['email'],
                role=serializer.validated_data['role'],
                added_by=request.user
            )
        except (WeddingNotFoundError, UserNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except AlreadyCollaboratorError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CollaboratorSerializer(role).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['delete'])
    def remove_collaborator(self, request, pk=None):
        """Remove a collaborator (owner or planner)."""
        user_id = request.data.get('user_id')

        if not user_id:
            return Response(
                {'error': 'user_id is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            remove_collaborator(wedding_id=pk, user_id=user_id, removed_by=request.user)
        except WeddingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (CannotRemoveOwnerError, NotCollaboratorError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: DuplicateCandidateSerializer(many=True)}, tags=['households'])
    @action(detail=True, methods=['get'], url_path='duplicate-households')
    def duplicate_households(self, request, pk=None):
        """Likely duplicate household pairs, highest confidence first."""
        try:
            candidates = find_duplicate_households(wedding_id=pk, user=request.user)
        except WeddingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        serializer = DuplicateCandidateSerializer(candidates, many=True)
        return Response(serializer.data)


class EventViewSet(viewsets.ModelViewSet):
    """
    ViewSet for wedding events.

    list requires ?wedding=<id>; writes need owner or planner role.
    """

    serializer_class = EventSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        queryset = Event.objects.filter(
            wedding__in=get_user_weddings(user=self.request.user).values('id')
        ).select_related('wedding')

        wedding_id = self.request.query_params.get('wedding')
        if wedding_id:
            queryset = queryset.filter(wedding_id=wedding_id)
        return queryset

    def get_serializer_class(self):
        if self.action in ['update', 'partial_update']:
            return EventUpdateSerializer
        return EventSerializer

    @extend_schema(parameters=[OpenApiParameter('wedding', str, required=True)])
    def list(self, request, *args, **kwargs):
        wedding_id = request.query_params.get('wedding')
        if not wedding_id:
            return Response(
                {'error': 'wedding query parameter is required'},
                status=status.HTTP_400_BAD_REQUEST
            )
        try:
            uuid.UUID(wedding_id)
        except ValueError:
            return Response({'error': 'Wedding not found'}, status=status.HTTP_404_NOT_FOUND)
        return super().list(request, *args, **kwargs)

    def retrieve(self, request, *args, **kwargs):
        try:
            event = get_event_for_user(event_id=self.kwargs['pk'], user=request.user)
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(EventSerializer(event).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        wedding = data.pop('wedding')

        try:
            event = create_event(wedding_id=wedding.id, user=request.user, **data)
        except WeddingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            event = update_event(
                event_id=self.kwargs['pk'],
                user=request.user,
                **serializer.validated_data
            )
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(EventSerializer(event).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_event(event_id=self.kwargs['pk'], user=request.user)
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WeddingAccessDeniedError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(status=status.HTTP_204_NO_CONTENT)
