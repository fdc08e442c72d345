import pytest
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.weddings.models import Wedding, WeddingRole, WeddingRoleType, Event


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def couple_user(db):
    """Create and return the wedding owner."""
    return User.objects.create_user(
        email='couple@example.com',
        password='TestPass123!',
        display_name='Priya & Arjun',
        email_verified=True,
    )


@pytest.fixture
def planner_user(db):
    return User.objects.create_user(
        email='planner@example.com',
        password='TestPass123!',
        display_name='Wedding Planner',
        role='vendor',
    )


@pytest.fixture
def viewer_user(db):
    return User.objects.create_user(
        email='viewer@example.com',
        password='TestPass123!',
        display_name='Aunty Viewer',
    )


@pytest.fixture
def other_user(db):
    """Create and return a user with no role on any wedding."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other User',
    )


@pytest.fixture
def wedding(couple_user, planner_user, viewer_user):
    """Wedding owned by couple_user with a planner and a viewer."""
    wedding = Wedding.objects.create(
        owner=couple_user,
        partner1_name='Priya',
        partner2_name='Arjun',
        date=date(2027, 2, 14),
        location='Jaipur',
    )
    WeddingRole.objects.create(user=couple_user, wedding=wedding, role=WeddingRoleType.OWNER)
    WeddingRole.objects.create(user=planner_user, wedding=wedding, role=WeddingRoleType.PLANNER)
    WeddingRole.objects.create(user=viewer_user, wedding=wedding, role=WeddingRoleType.VIEWER)
    return wedding


@pytest.fixture
def event(wedding):
    return Event.objects.create(wedding=wedding, name='Sangeet', location='Rambagh Palace', order=1)


@pytest.fixture
def authenticated_client(api_client, couple_user):
    """Return API client authenticated as the wedding owner."""
    refresh = RefreshToken.for_user(couple_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def planner_client(planner_user):
    client = APIClient()
    client.force_authenticate(user=planner_user)
    return client


@pytest.fixture
def viewer_client(viewer_user):
    client = APIClient()
    client.force_authenticate(user=viewer_user)
    return client


@pytest.fixture
def other_client(other_user):
    client = APIClient()
    client.force_authenticate(user=other_user)
    return client
