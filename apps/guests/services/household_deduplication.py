"""Duplicate household detection using fuzzy matching."""

import re
from collections import defaultdict
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from django.conf import settings
from fuzzywuzzy import fuzz

from apps.accounts.models import User
from apps.weddings.services import get_wedding_for_user

from ..models import Guest, Household, normalize_name


# Signal weights; the sum is clamped to 1.0
EMAIL_MATCH_WEIGHT = 0.5
PHONE_MATCH_WEIGHT = 0.4
NEARLY_IDENTICAL_NAME_WEIGHT = 0.5
SIMILAR_NAME_WEIGHT = 0.35
SHARED_GUEST_WEIGHT = 0.2
SHARED_GUEST_MAX_WEIGHT = 0.4

# Fuzzy ratio thresholds (0-100)
NEARLY_IDENTICAL_NAME_RATIO = 95
SIMILAR_NAME_RATIO = 80
SHARED_GUEST_NAME_RATIO = 90

DUPLICATE_CONFIDENCE_THRESHOLD = 0.5


def normalize_email(email: Optional[str]) -> str:
    return (email or '').lower().strip()


def normalize_phone(phone: Optional[str]) -> str:
    """Digits only, last 10 (drops country codes)."""
    return re.sub(r'\D', '', phone or '')[-10:]


def name_similarity(name1: str, name2: str) -> int:
    """Fuzzy ratio (0-100) of the normalized names."""
    norm1 = normalize_name(name1)
    norm2 = normalize_name(name2)
    if norm1 == norm2:
        return 100 if norm1 else 0
    return fuzz.ratio(norm1, norm2)


def _household_emails(household: Household, guests: Sequence[Guest]) -> set:
    emails = {normalize_email(household.contact_email)}
    emails.update(normalize_email(guest.email) for guest in guests)
    emails.discard('')
    return emails


def _household_phones(guests: Sequence[Guest]) -> set:
    phones = {normalize_phone(guest.phone) for guest in guests}
    phones.discard('')
    return phones


def _shared_guest_names(guests1: Sequence[Guest], guests2: Sequence[Guest]) -> List[str]:
    shared = []
    unmatched = list(guests2)
    for guest in guests1:
        for other in unmatched:
            if name_similarity(guest.name, other.name) >= SHARED_GUEST_NAME_RATIO:
                shared.append(guest.name)
                unmatched.remove(other)
                break
    return shared


def score_household_pair(
    household1: Household,
    guests1: Sequence[Guest],
    household2: Household,
    guests2: Sequence[Guest],
) -> Tuple[float, List[str]]:
    """
    Score how likely two households are the same family.

    Works on already-loaded rows only. Missing emails or phones simply
    contribute nothing, so empty households are compared by name (and
    household contact email) alone.

    Returns:
        (confidence in [0, 1], list of human-readable match reasons)
    """
    score = 0.0
    reasons = []

    if _household_emails(household1, guests1) & _household_emails(household2, guests2):
        score += EMAIL_MATCH_WEIGHT
        reasons.append('Same email address')

    if _household_phones(guests1) & _household_phones(guests2):
        score += PHONE_MATCH_WEIGHT
        reasons.append('Same phone number')

    similarity = name_similarity(household1.name, household2.name)
    if similarity >= NEARLY_IDENTICAL_NAME_RATIO:
        score += NEARLY_IDENTICAL_NAME_WEIGHT
        reasons.append(f'Nearly identical names ({similarity}%)')
    elif similarity >= SIMILAR_NAME_RATIO:
        score += SIMILAR_NAME_WEIGHT
        reasons.append(f'Similar names ({similarity}%)')

    shared = _shared_guest_names(guests1, guests2)
    if shared:
        score += min(SHARED_GUEST_WEIGHT * len(shared), SHARED_GUEST_MAX_WEIGHT)
        reasons.extend(f'Shared guest name: {name}' for name in shared)

    return round(min(score, 1.0), 2), reasons


def score_households(
    households_with_guests: Sequence[Tuple[Household, Sequence[Guest]]]
) -> List[dict]:
    """
    Score every unordered pair of distinct households exactly once.

    Returns:
        List of candidate dicts:
        [
            {
                'household1': Household,
                'household2': Household,
                'guests1': [Guest, ...],
                'guests2': [Guest, ...],
                'confidence': float,
                'match_reasons': [str, ...],
            }
        ]
    """
    scored = []
    for i, (household1, guests1) in enumerate(households_with_guests):
        for household2, guests2 in households_with_guests[i + 1:]:
            if household1.id == household2.id:
                continue

            confidence, reasons = score_household_pair(
                household1, guests1, household2, guests2
            )
            scored.append({
                'household1': household1,
                'household2': household2,
                'guests1': list(guests1),
                'guests2': list(guests2),
                'confidence': confidence,
                'match_reasons': reasons,
            })
    return scored


def build_duplicate_candidates(
    households_with_guests: Sequence[Tuple[Household, Sequence[Guest]]],
    threshold: float = DUPLICATE_CONFIDENCE_THRESHOLD,
) -> List[dict]:
    """Pairs at or above the threshold, highest confidence first."""
    candidates = [
        pair for pair in score_households(households_with_guests)
        if pair['confidence'] >= threshold
    ]
    candidates.sort(key=lambda pair: pair['confidence'], reverse=True)
    return candidates


def load_households_with_guests(*, wedding_id: UUID) -> List[Tuple[Household, List[Guest]]]:
    """All households of a wedding with their guests, in two queries."""
    households = list(
        Household.objects.filter(wedding_id=wedding_id).order_by('created_at', 'id')
    )

    guests_by_household = defaultdict(list)
    for guest in Guest.objects.filter(wedding_id=wedding_id, household__isnull=False):
        guests_by_household[guest.household_id].append(guest)

    return [(household, guests_by_household[household.id]) for household in households]


def find_duplicate_households(
    *,
    wedding_id: UUID,
    user: User,
    threshold: Optional[float] = None
) -> List[dict]:
    """
    Build the duplicate review queue for one wedding.

    Recomputed on every call; nothing is stored.

    Args:
        wedding_id: UUID of the wedding
        user: Requesting user (needs read access)
        threshold: Minimum confidence, defaults to settings.DUPLICATE_CONFIDENCE_THRESHOLD

    Raises:
        WeddingNotFoundError: If wedding doesn't exist
        WeddingAccessDeniedError: If user has no access
    """
    get_wedding_for_user(wedding_id=wedding_id, user=user)

    if threshold is None:
        threshold = getattr(
            settings, 'DUPLICATE_CONFIDENCE_THRESHOLD', DUPLICATE_CONFIDENCE_THRESHOLD
        )

    return build_duplicate_candidates(
        load_households_with_guests(wedding_id=wedding_id),
        threshold=threshold,
    )
