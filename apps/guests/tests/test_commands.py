import pytest
from io import StringIO
from django.core.management import call_command

from apps.accounts.models import User
from apps.guests.models import Household, Invitation
from apps.guests.services import find_duplicate_households
from apps.weddings.models import Wedding


@pytest.mark.django_db
class TestCreateSampleData:

    def test_creates_reviewable_duplicates(self):
        call_command('create_sample_data', stdout=StringIO())

        couple = User.objects.get(email='priya@example.com')
        wedding = Wedding.objects.get(owner=couple)
        assert Household.objects.filter(wedding=wedding).count() == 5
        assert Invitation.objects.filter(event__wedding=wedding).count() == 8 * 4

        candidates = find_duplicate_households(wedding_id=wedding.id, user=couple)
        pairs = {
            frozenset([candidate['household1'].name, candidate['household2'].name])
            for candidate in candidates
        }
        assert frozenset(['Sharma Family', 'Sharma Fam']) in pairs
        assert frozenset(['Mehta Household', 'Kapoor Family']) in pairs

    def test_clear_recreates(self):
        call_command('create_sample_data', stdout=StringIO())
        call_command('create_sample_data', '--clear', stdout=StringIO())

        assert Wedding.objects.count() == 1
