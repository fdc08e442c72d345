import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.weddings.models import Wedding, WeddingRole, WeddingRoleType, Event
from apps.guests.models import Household, Guest, Invitation, Affiliation, RelationshipTier


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
def viewer_user(db):
    return User.objects.create_user(
        email='viewer@example.com',
        password='TestPass123!',
        display_name='Aunty Viewer',
    )


@pytest.fixture
def other_user(db):
    """Create and return a user with no role on the wedding."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other Couple',
    )


@pytest.fixture
def wedding(couple_user, viewer_user):
    """Wedding owned by couple_user with a read-only viewer."""
    wedding = Wedding.objects.create(owner=couple_user, partner1_name='Priya', partner2_name='Arjun')
    WeddingRole.objects.create(user=couple_user, wedding=wedding, role=WeddingRoleType.OWNER)
    WeddingRole.objects.create(user=viewer_user, wedding=wedding, role=WeddingRoleType.VIEWER)
    return wedding


@pytest.fixture
def other_wedding(other_user):
    """A wedding belonging to a different tenant."""
    wedding = Wedding.objects.create(owner=other_user, partner1_name='Sara', partner2_name='Tom')
    WeddingRole.objects.create(user=other_user, wedding=wedding, role=WeddingRoleType.OWNER)
    return wedding


@pytest.fixture
def sangeet(wedding):
    return Event.objects.create(wedding=wedding, name='Sangeet', order=1)


@pytest.fixture
def reception(wedding):
    return Event.objects.create(wedding=wedding, name='Reception', order=2)


@pytest.fixture
def smith_family(wedding):
    """Older household: John (main contact) and Jane Smith."""
    household = Household.objects.create(
        wedding=wedding,
        name='Smith Family',
        contact_email='smiths@example.com',
        max_count=2,
        affiliation=Affiliation.BRIDE,
        relationship_tier=RelationshipTier.EXTENDED_FAMILY,
    )
    Guest.objects.create(
        wedding=wedding,
        household=household,
        name='John Smith',
        email='john@example.com',
        is_main_household_contact=True,
    )
    Guest.objects.create(wedding=wedding, household=household, name='Jane Smith')
    return household


@pytest.fixture
def smith_fam(wedding):
    """Newer duplicate of the Smiths, entered by someone else."""
    household = Household.objects.create(
        wedding=wedding,
        name='Smith Fam',
        contact_email='SMITHS@example.com',
        max_count=2,
    )
    Guest.objects.create(
        wedding=wedding,
        household=household,
        name='john smith',
        phone='+1 (555) 123-4567',
        is_main_household_contact=True,
    )
    Guest.objects.create(wedding=wedding, household=household, name='Baby Smith')
    return household


@pytest.fixture
def patel_household(wedding):
    household = Household.objects.create(wedding=wedding, name='Patel Household', max_count=1)
    Guest.objects.create(wedding=wedding, household=household, name='Nikhil Patel', phone='9876543210')
    return household


@pytest.fixture
def john_invitation(smith_family, sangeet):
    """Survivor-side John is invited to the Sangeet."""
    john = smith_family.guests.get(name='John Smith')
    return Invitation.objects.create(guest=john, event=sangeet)


@pytest.fixture
def duplicate_john_invitations(smith_fam, sangeet, reception):
    """Duplicate-side john is invited to the Sangeet and the Reception."""
    john = smith_fam.guests.get(name='john smith')
    return [
        Invitation.objects.create(guest=john, event=sangeet),
        Invitation.objects.create(guest=john, event=reception),
    ]


@pytest.fixture
def authenticated_client(api_client, couple_user):
    """Return API client authenticated as the wedding owner."""
    refresh = RefreshToken.for_user(couple_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


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
