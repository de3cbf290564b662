"""Free-text matching and relevance scoring for directory search."""
from typing import List, Tuple

from .categories import get_all_subcategories
from .models import ProfessionalRecord

EMERGENCY_TEXT = "emergency hitno"
WEEKEND_EVENING_TEXT = "night weekend evening vikend navecer vece noc"

MIN_PARTIAL_LENGTH = 3

FIELD_WEIGHTS = {
    "name": 10,
    "categories": 8,
    "subcategories": 3,
    "bio": 5,
    "location": 4,
    "service_area": 3,
    "emergency_available": 2,
    "weekend_evening": 2,
}


def tokenize(query: str) -> List[str]:
    return (query or "").lower().strip().split()


def partial_match(term: str, text: str) -> bool:
    """True if any prefix of ``term`` at least three characters long occurs in ``text``."""
    if not term or not text or len(term) < MIN_PARTIAL_LENGTH:
        return False

    term = term.lower().strip()
    text = text.lower().strip()
    for end in range(MIN_PARTIAL_LENGTH, len(term) + 1):
        if term[:end] in text:
            return True
    return False


def search_fields(record: ProfessionalRecord) -> List[Tuple[str, int]]:
    """Lower-cased searchable text of a record paired with its field weight."""
    # Subcategories are looked up on every call, never stored on the record.
    subcategories = get_all_subcategories(record.categories)

    fields = [
        (record.name, FIELD_WEIGHTS["name"]),
        (" ".join(record.categories), FIELD_WEIGHTS["categories"]),
        (" ".join(subcategories), FIELD_WEIGHTS["subcategories"]),
        (record.bio, FIELD_WEIGHTS["bio"]),
        (record.location, FIELD_WEIGHTS["location"]),
        (record.service_area, FIELD_WEIGHTS["service_area"]),
        (EMERGENCY_TEXT if record.emergency_available else "", FIELD_WEIGHTS["emergency_available"]),
        (WEEKEND_EVENING_TEXT if record.weekend_evening else "", FIELD_WEIGHTS["weekend_evening"]),
    ]
    return [(text.lower(), weight) for text, weight in fields]


def term_matches(term: str, text: str) -> bool:
    if not text:
        return False
    return term in text or (len(term) >= MIN_PARTIAL_LENGTH and partial_match(term, text))


def field_score(term: str, text: str, weight: int) -> int:
    if not text:
        return 0
    if term in text:
        return weight * 2
    if len(term) >= MIN_PARTIAL_LENGTH and partial_match(term, text):
        return weight
    return 0


def matches_terms(record: ProfessionalRecord, terms: List[str]) -> bool:
    """A record matches when any term hits any field, exactly or by prefix."""
    if not terms:
        return True
    fields = search_fields(record)
    return any(
        term_matches(term, text)
        for term in terms
        for text, _ in fields
    )


def calculate_search_score(record: ProfessionalRecord, terms: List[str]) -> float:
    if not terms:
        return 0.0

    fields = search_fields(record)
    total = 0
    for term in terms:
        for text, weight in fields:
            total += field_score(term, text, weight)
    return float(total)
