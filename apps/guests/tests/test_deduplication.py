"""
Tests for duplicate household detection.

Scorer tests run on unsaved model instances; the candidate builder is
also exercised against the database through find_duplicate_households.
"""

import pytest
from uuid import uuid4

from apps.guests.models import Household, Guest
from apps.guests.services import (
    normalize_email,
    normalize_phone,
    name_similarity,
    score_household_pair,
    score_households,
    build_duplicate_candidates,
    find_duplicate_households,
)
from apps.weddings.services import WeddingAccessDeniedError, WeddingNotFoundError


def make_household(name, contact_email=''):
    return Household(name=name, contact_email=contact_email)


def make_guest(name, email='', phone=''):
    return Guest(name=name, email=email, phone=phone)


# =============================================================================
# Normalisation helpers
# =============================================================================

class TestNormalization:

    def test_normalize_email(self):
        assert normalize_email('  John@Example.COM ') == 'john@example.com'
        assert normalize_email(None) == ''

    def test_normalize_phone_keeps_last_ten_digits(self):
        assert normalize_phone('+1 (555) 123-4567') == '5551234567'
        assert normalize_phone('+91 98765 43210') == '9876543210'
        assert normalize_phone('') == ''
        assert normalize_phone(None) == ''

    def test_name_similarity_ignores_case_and_punctuation(self):
        assert name_similarity('The Smith-Family!', 'the smith-family') == 100

    def test_name_similarity_empty_names(self):
        assert name_similarity('', '') == 0


# =============================================================================
# Pair scoring
# =============================================================================

class TestScoreHouseholdPair:

    def test_similar_name_and_same_email(self):
        """'Smith Family' vs 'Smith Fam' with one shared address."""
        confidence, reasons = score_household_pair(
            make_household('Smith Family', 'a@x.com'), [],
            make_household('Smith Fam', 'A@X.com'), [],
        )

        assert confidence >= 0.8
        assert confidence == 0.85
        assert reasons == ['Same email address', 'Similar names (86%)']

    def test_same_email_only_meets_threshold(self):
        confidence, reasons = score_household_pair(
            make_household('Kapoor Family', 'shared@example.com'), [],
            make_household('Mehta Household'), [make_guest('Ritu Mehta', email='shared@example.com')],
        )

        assert confidence == 0.5
        assert reasons == ['Same email address']

    def test_identical_names(self):
        confidence, reasons = score_household_pair(
            make_household('Sharma Family'), [],
            make_household('sharma  family'), [],
        )

        assert confidence == 0.5
        assert reasons == ['Nearly identical names (100%)']

    def test_same_phone_across_formats(self):
        confidence, reasons = score_household_pair(
            make_household('Iyer Household'), [make_guest('Lakshmi Iyer', phone='+91 98765 43210')],
            make_household('Bose Family'), [make_guest('Anil Bose', phone='09876543210')],
        )

        assert confidence == 0.4
        assert reasons == ['Same phone number']

    def test_unrelated_households(self):
        confidence, reasons = score_household_pair(
            make_household('Rao Household', 'rao@example.com'), [make_guest('Asha Rao', phone='1112223333')],
            make_household('Fernandes Family', 'f@example.com'), [make_guest('Leo Fernandes', phone='4445556666')],
        )

        assert confidence == 0.0
        assert reasons == []

    def test_empty_households_compare_by_name(self):
        """No guests, no emails: only the name can contribute."""
        confidence, reasons = score_household_pair(
            make_household('Gupta Family'), [],
            make_household('Gupta Family'), [],
        )

        assert confidence == 0.5
        assert reasons == ['Nearly identical names (100%)']

    def test_missing_contact_details_do_not_match(self):
        """Two blank emails or phones are not a match."""
        confidence, reasons = score_household_pair(
            make_household('Rao Household'), [make_guest('Asha Rao')],
            make_household('Fernandes Family'), [make_guest('Leo Fernandes')],
        )

        assert confidence == 0.0
        assert reasons == []

    def test_shared_guest_bonus_is_capped(self):
        names = ['Asha Rao', 'Vikram Rao', 'Dev Rao']
        confidence, reasons = score_household_pair(
            make_household('Rao Household'), [make_guest(name) for name in names],
            make_household('Fernandes Family'), [make_guest(name) for name in names],
        )

        assert confidence == 0.4
        assert reasons == [f'Shared guest name: {name}' for name in names]

    def test_confidence_clamped_to_one(self):
        confidence, reasons = score_household_pair(
            make_household('Smith Family', 'smiths@example.com'),
            [make_guest('John Smith', phone='555-123-4567')],
            make_household('Smith Family', 'smiths@example.com'),
            [make_guest('John Smith', phone='(555) 123 4567')],
        )

        assert confidence == 1.0
        assert len(reasons) == 4

    def test_order_of_households_does_not_change_confidence(self):
        household1 = make_household('Smith Family', 'a@x.com')
        household2 = make_household('Smith Fam')
        guests2 = [make_guest('Ann Smith', email='a@x.com')]

        forward, _ = score_household_pair(household1, [], household2, guests2)
        backward, _ = score_household_pair(household2, guests2, household1, [])

        assert forward == backward


# =============================================================================
# Candidate builder
# =============================================================================

class TestBuildDuplicateCandidates:

    def test_every_pair_scored_once(self):
        households = [(make_household(name), []) for name in ['A One', 'B Two', 'C Three']]

        scored = score_households(households)

        assert len(scored) == 3
        for pair in scored:
            assert pair['household1'].id != pair['household2'].id

    def test_same_household_never_paired_with_itself(self):
        household = make_household('Sharma Family')

        assert score_households([(household, []), (household, [])]) == []

    def test_threshold_and_ordering(self):
        exact1 = make_household('Sharma Family', 'sharma@example.com')
        exact2 = make_household('Sharma Family', 'sharma@example.com')
        name_only = make_household('Sharma Familee')
        unrelated = make_household('Fernandes Household')

        candidates = build_duplicate_candidates(
            [(exact1, []), (exact2, []), (name_only, []), (unrelated, [])]
        )

        confidences = [candidate['confidence'] for candidate in candidates]
        assert confidences == sorted(confidences, reverse=True)
        assert candidates[0]['confidence'] == 1.0
        assert all(candidate['confidence'] >= 0.5 for candidate in candidates)
        assert all(
            unrelated not in (candidate['household1'], candidate['household2'])
            for candidate in candidates
        )

    def test_custom_threshold(self):
        households = [
            (make_household('Iyer Household'), [make_guest('Lakshmi Iyer', phone='9876543210')]),
            (make_household('Bose Family'), [make_guest('Anil Bose', phone='9876543210')]),
        ]

        assert build_duplicate_candidates(households) == []
        assert len(build_duplicate_candidates(households, threshold=0.4)) == 1

    def test_no_households(self):
        assert build_duplicate_candidates([]) == []


@pytest.mark.django_db
class TestFindDuplicateHouseholds:

    def test_finds_smith_duplicates(self, wedding, couple_user, smith_family, smith_fam, patel_household):
        candidates = find_duplicate_households(wedding_id=wedding.id, user=couple_user)

        assert len(candidates) == 1
        candidate = candidates[0]
        assert {candidate['household1'].id, candidate['household2'].id} == {smith_family.id, smith_fam.id}
        assert candidate['confidence'] == 1.0
        assert 'Same email address' in candidate['match_reasons']
        assert any(reason.startswith('Shared guest name: ') for reason in candidate['match_reasons'])
        assert len(candidate['guests1']) == 2
        assert len(candidate['guests2']) == 2

    def test_other_weddings_are_not_compared(self, wedding, other_wedding, couple_user, smith_family):
        Household.objects.create(wedding=other_wedding, name='Smith Family', contact_email='smiths@example.com')

        assert find_duplicate_households(wedding_id=wedding.id, user=couple_user) == []

    def test_viewer_can_read_queue(self, wedding, viewer_user, smith_family, smith_fam):
        assert len(find_duplicate_households(wedding_id=wedding.id, user=viewer_user)) == 1

    def test_stranger_denied(self, wedding, other_user):
        with pytest.raises(WeddingAccessDeniedError):
            find_duplicate_households(wedding_id=wedding.id, user=other_user)

    def test_missing_wedding(self, couple_user):
        with pytest.raises(WeddingNotFoundError):
            find_duplicate_households(wedding_id=uuid4(), user=couple_user)
