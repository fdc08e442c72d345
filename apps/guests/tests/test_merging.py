"""
Service tests for household merging.

Tests cover:
- Guest reassignment and duplicate-person removal
- Invitation moves
- Rejections leave no partial effect
- Rollback on database failure
"""

import pytest
from datetime import timedelta
from uuid import uuid4
from unittest.mock import patch
from django.db import DatabaseError
from django.utils import timezone

from apps.guests.models import Household, Guest, Invitation, HouseholdMergeAudit, MergeDecision
from apps.guests.services import merge_households
from apps.guests.services.exceptions import InvalidMergeError, HouseholdNotFoundError
from apps.weddings.services import create_wedding, WeddingAccessDeniedError


def assert_untouched(smith_family, smith_fam):
    assert Household.objects.filter(id=smith_fam.id).exists()
    assert Guest.objects.filter(household=smith_fam).count() == 2
    assert Guest.objects.filter(household=smith_family).count() == 2
    assert HouseholdMergeAudit.objects.count() == 0


@pytest.mark.django_db
class TestMergeHouseholds:
    """Tests for household_merging.merge_households"""

    def test_merge_reassigns_and_deduplicates_guests(self, couple_user, smith_family, smith_fam):
        audit = merge_households(
            survivor_id=smith_family.id,
            merged_id=smith_fam.id,
            decision=MergeDecision.KEPT_OLDER,
            merged_by=couple_user,
        )

        assert not Household.objects.filter(id=smith_fam.id).exists()
        names = sorted(Guest.objects.filter(household=smith_family).values_list('name', flat=True))
        assert names == ['Baby Smith', 'Jane Smith', 'John Smith']

        assert audit.guests_reassigned == 1
        assert audit.guests_removed == 1
        assert audit.merged_household_id == smith_fam.id
        assert audit.merged_household_name == 'Smith Fam'
        assert audit.decision == MergeDecision.KEPT_OLDER
        assert audit.merged_by == couple_user
        assert audit.survivor == smith_family

    def test_no_guest_references_deleted_household(self, couple_user, smith_family, smith_fam):
        merged_id = smith_fam.id
        merge_households(
            survivor_id=smith_family.id,
            merged_id=merged_id,
            decision=MergeDecision.KEPT_OLDER,
            merged_by=couple_user,
        )

        assert not Guest.objects.filter(household_id=merged_id).exists()

    def test_duplicate_person_fills_gaps_on_survivor(self, couple_user, smith_family, smith_fam):
        merge_households(
            survivor_id=smith_family.id,
            merged_id=smith_fam.id,
            decision=MergeDecision.KEPT_OLDER,
            merged_by=couple_user,
        )

        john = Guest.objects.get(household=smith_family, name='John Smith')
        assert john.email == 'john@example.com'
        assert john.phone == '+1 (555) 123-4567'
        assert john.is_main_household_contact is True

    def test_reassigned_guest_is_not_second_main_contact(self, couple_user, smith_family, smith_fam):
        smith_fam.guests.filter(name='Baby Smith').update(is_main_household_contact=True)

        merge_households(
            survivor_id=smith_family.id,
            merged_id=smith_fam.id,
            decision=MergeDecision.KEPT_OLDER,
            merged_by=couple_user,
        )

        contacts = Guest.objects.filter(household=smith_family, is_main_household_contact=True)
        assert list(contacts.values_list('name', flat=True)) == ['John Smith']

    def test_survivor_seats_grow(self, couple_user, smith_family, smith_fam):
        merge_households(
            survivor_id=smith_family.id,
            merged_id=smith_fam.id,
            decision=MergeDecision.KEPT_OLDER,
            merged_by=couple_user,
        )

        smith_family.refresh_from_db()
        assert smith_family.max_count == 3

    def test_invitations_move_without_duplicates(
        self, couple_user, smith_family, smith_fam, sangeet, reception,
        john_invitation, duplicate_john_invitations
    ):
        audit = merge_households(
            survivor_id=smith_family.id,
            merged_id=smith_fam.id,
            decision=MergeDecision.KEPT_OLDER,
            merged_by=couple_user,
        )

        john = Guest.objects.get(household=smith_family, name='John Smith')
        events = sorted(Invitation.objects.filter(guest=john).values_list('event__name', flat=True))
        assert events == ['Reception', 'Sangeet']
        assert Invitation.objects.filter(id=john_invitation.id).exists()
        assert audit.invitations_moved == 1
        assert Invitation.objects.count() == 2

    def test_contact_email_backfilled(self, couple_user, smith_family, smith_fam):
        Household.objects.filter(id=smith_family.id).update(contact_email='')

        merge_households(
            survivor_id=smith_family.id,
            merged_id=smith_fam.id,
            decision=MergeDecision.KEPT_NEWER,
            merged_by=couple_user,
        )

        smith_family.refresh_from_db()
        assert smith_family.contact_email == 'SMITHS@example.com'

    def test_merge_empty_household(self, couple_user, wedding, smith_family):
        empty = Household.objects.create(wedding=wedding, name='Smiths')

        audit = merge_households(
            survivor_id=smith_family.id,
            merged_id=empty.id,
            decision=MergeDecision.KEPT_OLDER,
            merged_by=couple_user,
        )

        assert audit.guests_reassigned == 0
        assert audit.guests_removed == 0
        assert not Household.objects.filter(id=empty.id).exists()

    def test_second_merge_of_same_household_not_found(self, couple_user, smith_family, smith_fam):
        merge_households(
            survivor_id=smith_family.id,
            merged_id=smith_fam.id,
            decision=MergeDecision.KEPT_OLDER,
            merged_by=couple_user,
        )

        with pytest.raises(HouseholdNotFoundError):
            merge_households(
                survivor_id=smith_family.id,
                merged_id=smith_fam.id,
                decision=MergeDecision.KEPT_OLDER,
                merged_by=couple_user,
            )
        assert HouseholdMergeAudit.objects.count() == 1

    def test_same_household_rejected(self, couple_user, smith_family):
        with pytest.raises(InvalidMergeError):
            merge_households(
                survivor_id=smith_family.id,
                merged_id=smith_family.id,
                decision=MergeDecision.KEPT_OLDER,
                merged_by=couple_user,
            )

    def test_invalid_decision_rejected(self, couple_user, smith_family, smith_fam):
        with pytest.raises(InvalidMergeError):
            merge_households(
                survivor_id=smith_family.id,
                merged_id=smith_fam.id,
                decision='kept_both',
                merged_by=couple_user,
            )
        assert_untouched(smith_family, smith_fam)

    def test_missing_household(self, couple_user, smith_family):
        with pytest.raises(HouseholdNotFoundError):
            merge_households(
                survivor_id=smith_family.id,
                merged_id=uuid4(),
                decision=MergeDecision.KEPT_OLDER,
                merged_by=couple_user,
            )

    def test_malformed_household_id(self, couple_user, smith_family):
        with pytest.raises(HouseholdNotFoundError):
            merge_households(
                survivor_id=smith_family.id,
                merged_id='not-a-uuid',
                decision=MergeDecision.KEPT_OLDER,
                merged_by=couple_user,
            )

    def test_different_weddings_rejected(self, couple_user, smith_family):
        second = create_wedding(owner=couple_user, partner1_name='Priya', partner2_name='Arjun')
        elsewhere = Household.objects.create(wedding=second, name='Smith Family')

        with pytest.raises(InvalidMergeError):
            merge_households(
                survivor_id=smith_family.id,
                merged_id=elsewhere.id,
                decision=MergeDecision.KEPT_OLDER,
                merged_by=couple_user,
            )

        assert Household.objects.filter(id=elsewhere.id).exists()

    def test_cross_tenant_merge_denied(self, other_user, other_wedding, smith_family):
        """Owning one side is not enough to swallow another wedding's household."""
        own = Household.objects.create(wedding=other_wedding, name='Smith Family')

        with pytest.raises(WeddingAccessDeniedError):
            merge_households(
                survivor_id=own.id,
                merged_id=smith_family.id,
                decision=MergeDecision.KEPT_OLDER,
                merged_by=other_user,
            )

        assert Household.objects.filter(id=smith_family.id).exists()

    def test_viewer_cannot_merge(self, viewer_user, smith_family, smith_fam):
        with pytest.raises(WeddingAccessDeniedError):
            merge_households(
                survivor_id=smith_family.id,
                merged_id=smith_fam.id,
                decision=MergeDecision.KEPT_OLDER,
                merged_by=viewer_user,
            )
        assert_untouched(smith_family, smith_fam)

    def test_stranger_cannot_merge(self, other_user, smith_family, smith_fam):
        with pytest.raises(WeddingAccessDeniedError):
            merge_households(
                survivor_id=smith_family.id,
                merged_id=smith_fam.id,
                decision=MergeDecision.KEPT_OLDER,
                merged_by=other_user,
            )
        assert_untouched(smith_family, smith_fam)

    def test_database_failure_rolls_back(self, couple_user, smith_family, smith_fam):
        """A failure while writing the audit undoes every guest move."""
        with patch.object(
            HouseholdMergeAudit.objects, 'create', side_effect=DatabaseError('disk full')
        ):
            with pytest.raises(DatabaseError):
                merge_households(
                    survivor_id=smith_family.id,
                    merged_id=smith_fam.id,
                    decision=MergeDecision.KEPT_OLDER,
                    merged_by=couple_user,
                )

        assert_untouched(smith_family, smith_fam)
        john = Guest.objects.get(household=smith_family, name='John Smith')
        assert john.phone == ''
        smith_family.refresh_from_db()
        assert smith_family.max_count == 2


@pytest.mark.django_db
class TestMergeSameNameGuests:
    """Guests sharing a name within one household are distinct people."""

    def test_same_name_guests_in_merged_household_are_all_kept(self, couple_user, wedding, patel_household, sangeet):
        patel_fam = Household.objects.create(wedding=wedding, name='Patel Fam', max_count=2)
        first_baby = Guest.objects.create(wedding=wedding, household=patel_fam, name='Baby Patel')
        second_baby = Guest.objects.create(wedding=wedding, household=patel_fam, name='Baby Patel')
        invitation = Invitation.objects.create(guest=second_baby, event=sangeet)

        audit = merge_households(
            survivor_id=patel_household.id,
            merged_id=patel_fam.id,
            decision=MergeDecision.KEPT_OLDER,
            merged_by=couple_user,
        )

        assert Guest.objects.filter(household=patel_household).count() == 3
        assert set(
            Guest.objects.filter(household=patel_household, name='Baby Patel').values_list('id', flat=True)
        ) == {first_baby.id, second_baby.id}
        invitation.refresh_from_db()
        assert invitation.guest_id == second_baby.id
        assert audit.guests_reassigned == 2
        assert audit.guests_removed == 0

        patel_household.refresh_from_db()
        assert patel_household.max_count == 3

    def test_duplicate_names_on_survivor_match_earliest_guest(self, couple_user, wedding, patel_household, sangeet):
        earlier = Guest.objects.create(wedding=wedding, household=patel_household, name='Asha Patel')
        later = Guest.objects.create(wedding=wedding, household=patel_household, name='Asha Patel')
        Guest.objects.filter(id=earlier.id).update(created_at=timezone.now() - timedelta(days=2))
        Guest.objects.filter(id=later.id).update(created_at=timezone.now() - timedelta(days=1))

        patel_fam = Household.objects.create(wedding=wedding, name='Patel Fam', max_count=1)
        duplicate = Guest.objects.create(
            wedding=wedding, household=patel_fam, name='asha patel', email='asha@example.com'
        )
        invitation = Invitation.objects.create(guest=duplicate, event=sangeet)

        audit = merge_households(
            survivor_id=patel_household.id,
            merged_id=patel_fam.id,
            decision=MergeDecision.KEPT_OLDER,
            merged_by=couple_user,
        )

        assert audit.guests_removed == 1
        assert not Guest.objects.filter(id=duplicate.id).exists()
        invitation.refresh_from_db()
        assert invitation.guest_id == earlier.id

        earlier.refresh_from_db()
        later.refresh_from_db()
        assert earlier.email == 'asha@example.com'
        assert later.email == ''
