"""Duplicate checks for guest rows about to be imported."""

from typing import List, Sequence, Tuple
from uuid import UUID

from apps.accounts.models import User
from apps.weddings.services import get_wedding_for_user

from ..models import Guest
from .household_deduplication import name_similarity, normalize_email, normalize_phone


IMPORT_EMAIL_WEIGHT = 0.7
IMPORT_PHONE_WEIGHT = 0.6
IMPORT_NEARLY_IDENTICAL_WEIGHT = 0.5
IMPORT_SIMILAR_WEIGHT = 0.35

IMPORT_DUPLICATE_THRESHOLD = 0.4


def _field(person, name):
    if isinstance(person, dict):
        return person.get(name) or ''
    return getattr(person, name, '') or ''


def compare_people(person1, person2) -> Tuple[float, List[str]]:
    """
    Score two guest records (model instances or import dicts).

    Returns:
        (raw score, reasons); the score is not clamped
    """
    score = 0.0
    reasons = []

    email1 = normalize_email(_field(person1, 'email'))
    if email1 and email1 == normalize_email(_field(person2, 'email')):
        score += IMPORT_EMAIL_WEIGHT
        reasons.append('Same email address')

    phone1 = normalize_phone(_field(person1, 'phone'))
    if phone1 and phone1 == normalize_phone(_field(person2, 'phone')):
        score += IMPORT_PHONE_WEIGHT
        reasons.append('Same phone number')

    similarity = name_similarity(_field(person1, 'name'), _field(person2, 'name'))
    if similarity >= 95:
        score += IMPORT_NEARLY_IDENTICAL_WEIGHT
        reasons.append(f'Nearly identical names ({similarity}%)')
    elif similarity >= 80:
        score += IMPORT_SIMILAR_WEIGHT
        reasons.append(f'Similar names ({similarity}%)')

    return score, reasons


def detect_import_duplicates(
    rows: Sequence[dict],
    existing_guests: Sequence[Guest],
    threshold: float = IMPORT_DUPLICATE_THRESHOLD
) -> dict:
    """
    Compare import rows against existing guests and against each other.

    Returns:
        {
            'duplicates_with_existing': [
                {'import_index', 'matched_guest_id', 'matched_guest_name',
                 'confidence', 'match_reasons'}
            ],
            'duplicates_in_batch': [
                {'index1', 'index2', 'confidence', 'match_reasons'}
            ],
        }
        Both lists sorted by confidence, highest first.
    """
    with_existing = []
    in_batch = []

    for i, row in enumerate(rows):
        for guest in existing_guests:
            score, reasons = compare_people(row, guest)
            if score >= threshold:
                with_existing.append({
                    'import_index': i,
                    'matched_guest_id': guest.id,
                    'matched_guest_name': guest.name,
                    'confidence': round(min(score, 1.0), 2),
                    'match_reasons': reasons,
                })

        for j in range(i + 1, len(rows)):
            score, reasons = compare_people(row, rows[j])
            if score >= threshold:
                in_batch.append({
                    'index1': i,
                    'index2': j,
                    'confidence': round(min(score, 1.0), 2),
                    'match_reasons': reasons,
                })

    with_existing.sort(key=lambda match: match['confidence'], reverse=True)
    in_batch.sort(key=lambda match: match['confidence'], reverse=True)

    return {
        'duplicates_with_existing': with_existing,
        'duplicates_in_batch': in_batch,
    }


def check_import_duplicates(*, wedding_id: UUID, user: User, rows: Sequence[dict]) -> dict:
    """Run detect_import_duplicates against the wedding's current guest list."""
    get_wedding_for_user(wedding_id=wedding_id, user=user)
    existing = list(Guest.objects.filter(wedding_id=wedding_id))
    return detect_import_duplicates(rows, existing)
