import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .backend import DirectoryClient
from .data_processing import RecordProcessor
from .exceptions import FetchError
from .models import ProfessionalRecord, QueryState, SearchResult
from .pagination import paginate, total_pages
from .scoring import calculate_search_score, matches_terms

logger = logging.getLogger(__name__)


class DirectorySnapshot:
    """Read-only copy of every majstor, fetched once per directory view."""

    def __init__(self, records: Iterable[ProfessionalRecord] = (), error: Optional[str] = None):
        unique: Dict[str, ProfessionalRecord] = {}
        for record in records:
            if record.id in unique:
                logger.warning("Duplicate majstor id %s in snapshot, keeping first", record.id)
                continue
            if record.search_score is not None:
                record = record.with_score(None)
            unique[record.id] = record
        self._records: Tuple[ProfessionalRecord, ...] = tuple(unique.values())
        self._by_id = unique
        self.error = error

    @classmethod
    def from_rows(cls, rows: Iterable[Any]) -> "DirectorySnapshot":
        return cls(RecordProcessor().process_all_rows(rows))

    @property
    def records(self) -> Tuple[ProfessionalRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ProfessionalRecord]:
        return iter(self._records)

    def get(self, professional_id: str) -> Optional[ProfessionalRecord]:
        return self._by_id.get(professional_id)

    def available_categories(self) -> List[str]:
        return _unique_values(r.categories for r in self._records)

    def available_languages(self) -> List[str]:
        return _unique_values(r.languages for r in self._records)


def _unique_values(groups: Iterable[List[str]]) -> List[str]:
    seen: Dict[str, None] = {}
    for group in groups:
        for value in group:
            seen.setdefault(value, None)
    return list(seen)


async def load_snapshot(client: Optional[DirectoryClient] = None) -> DirectorySnapshot:
    """Fetch the snapshot; a failed fetch gives an empty snapshot carrying the error."""
    try:
        client = client or DirectoryClient()
    except ValueError as e:
        logger.error("Backend is not configured: %s", e)
        return DirectorySnapshot(error=str(e))

    try:
        records = await client.fetch_all_professionals()
    except FetchError as e:
        logger.error("Could not load majstori: %s", e)
        return DirectorySnapshot(error=str(e))
    return DirectorySnapshot(records)


_EARLIEST = float("-inf")

SORT_KEYS: Dict[str, Callable[[ProfessionalRecord], Any]] = {
    "name": lambda r: (r.name or "").lower(),
    "location": lambda r: (r.location or "").lower(),
    "wait_time_days": lambda r: r.wait_time_days if r.wait_time_days is not None else 0,
    "created_at": lambda r: r.created_at.timestamp() if isinstance(r.created_at, datetime) else _EARLIEST,
    "search_score": lambda r: r.search_score if r.search_score is not None else 0.0,
}


class DirectorySearchEngine:
    def __init__(self, snapshot: DirectorySnapshot) -> None:
        self.snapshot = snapshot

    # -------------------------
    # Filter stage
    # -------------------------
    def matches_filters(self, record: ProfessionalRecord, state: QueryState) -> bool:
        if state.categories and not set(record.categories) & set(state.categories):
            return False

        if state.languages and not set(record.languages) & set(state.languages):
            return False

        if state.emergency_only and not record.emergency_available:
            return False

        if state.weekend_only and not record.weekend_evening:
            return False

        if state.location_query:
            location_query = state.location_query.lower()
            if (
                location_query not in record.location.lower()
                and location_query not in record.service_area.lower()
            ):
                return False

        return matches_terms(record, state.search_terms)

    def filter_records(self, state: QueryState) -> List[ProfessionalRecord]:
        terms = state.search_terms
        results = []
        for record in self.snapshot:
            if not self.matches_filters(record, state):
                continue
            if terms:
                results.append(record.with_score(calculate_search_score(record, terms)))
            else:
                results.append(record)
        return results

    # -------------------------
    # Sort stage
    # -------------------------
    def sort_records(
        self,
        records: List[ProfessionalRecord],
        field: str,
        order: str,
    ) -> List[ProfessionalRecord]:
        descending = order == "desc"

        if field == "search_score":
            # Equal scores fall back to name A-Z whichever way scores run.
            sign = -1 if descending else 1
            return sorted(
                records,
                key=lambda r: (sign * SORT_KEYS["search_score"](r), SORT_KEYS["name"](r)),
            )

        return sorted(records, key=SORT_KEYS[field], reverse=descending)

    # -------------------------
    # Entry point
    # -------------------------
    def apply_query(self, state: QueryState) -> SearchResult:
        field, order = state.effective_sort()

        filtered = self.filter_records(state)
        ordered = self.sort_records(filtered, field, order)

        return SearchResult(
            items=paginate(ordered, state.page_number, state.page_size),
            total_count=len(ordered),
            total_pages=total_pages(len(ordered), state.page_size),
            page_number=state.page_number,
            page_size=state.page_size,
            sort_field=field,
            sort_order=order,
            error=self.snapshot.error,
        )


def apply_query(snapshot: DirectorySnapshot, state: QueryState) -> SearchResult:
    return DirectorySearchEngine(snapshot).apply_query(state)
