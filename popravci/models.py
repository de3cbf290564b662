from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .config import Config

SortField = Literal["name", "wait_time_days", "location", "created_at", "search_score"]
SortOrder = Literal["asc", "desc"]

SORT_FIELDS: Tuple[str, ...] = ("name", "wait_time_days", "location", "created_at", "search_score")

_TIMESTAMP = TypeAdapter(datetime)


class ProfessionalRecord(BaseModel):
    """One majstor row as stored in the backend ``majstori`` table."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    user_id: Optional[str] = None
    name: str = ""
    location: str = ""
    categories: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    contacts: List[str] = Field(default_factory=list)
    bio: str = ""
    wait_time_days: Optional[int] = None
    emergency_available: bool = False
    weekend_evening: bool = False
    service_area: str = ""
    created_at: Optional[datetime] = None
    profile_picture: Optional[str] = None

    # Set only on copies returned while a free-text query is active.
    search_score: Optional[float] = Field(default=None, exclude=True)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("user_id", "profile_picture", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        if isinstance(value, str):
            return value or None
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return None

    @field_validator("name", "location", "bio", "service_area", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return ""

    @field_validator("categories", "languages", "contacts", mode="before")
    @classmethod
    def _text_list(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            return [value] if value.strip() else []
        if not isinstance(value, (list, tuple, set)):
            return []
        items = []
        for item in value:
            if isinstance(item, str):
                items.append(item)
            elif isinstance(item, (int, float)) and not isinstance(item, bool):
                items.append(str(item))
        return items

    @field_validator("emergency_available", "weekend_evening", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value == 1
        if isinstance(value, str):
            return value.strip().lower() in ("true", "t", "1", "yes")
        return False

    @field_validator("wait_time_days", mode="before")
    @classmethod
    def _wait_days_or_unknown(cls, value: Any) -> Optional[int]:
        # Anything that is not a whole, non-negative day count is unknown.
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            value = value.strip()
            if not value.isdigit():
                return None
            return int(value)
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, int) and value >= 0:
            return value
        return None

    @field_validator("created_at", mode="before")
    @classmethod
    def _timestamp_or_unknown(cls, value: Any) -> Optional[datetime]:
        if value is None or value == "":
            return None
        try:
            return _TIMESTAMP.validate_python(value)
        except ValidationError:
            return None

    def with_score(self, score: Optional[float]) -> "ProfessionalRecord":
        return self.model_copy(update={"search_score": score})


class QueryState(BaseModel):
    """
    Everything the directory page lets a visitor choose.

    States are immutable. Every transition returns a new state and, apart from
    paging itself, sends the visitor back to the first page.
    """

    model_config = ConfigDict(frozen=True)

    categories: Tuple[str, ...] = ()
    languages: Tuple[str, ...] = ()
    emergency_only: bool = False
    weekend_only: bool = False
    location_query: str = ""
    free_text_query: str = ""
    sort_field: SortField = "name"
    sort_order: SortOrder = "asc"
    page_number: int = Field(default=1, ge=1)
    page_size: int = Field(default=Config.DEFAULT_PAGE_SIZE, ge=1)

    @property
    def search_terms(self) -> List[str]:
        from .scoring import tokenize
        return tokenize(self.free_text_query)

    @property
    def is_searching(self) -> bool:
        return bool(self.search_terms)

    def effective_sort(self) -> Tuple[str, str]:
        # A running search always ranks by relevance; the chosen sort comes back once it is cleared.
        if self.is_searching:
            return "search_score", "desc"
        return self.sort_field, self.sort_order

    # -------------------------
    # Transitions
    # -------------------------
    def _replace(self, **changes: Any) -> "QueryState":
        data: Dict[str, Any] = self.model_dump()
        data.update(changes)
        return QueryState.model_validate(data)

    def with_search(self, query: str) -> "QueryState":
        return self._replace(free_text_query=query or "", page_number=1)

    def with_location(self, location: str) -> "QueryState":
        return self._replace(location_query=location or "", page_number=1)

    def with_emergency_only(self, enabled: bool) -> "QueryState":
        return self._replace(emergency_only=enabled, page_number=1)

    def with_weekend_only(self, enabled: bool) -> "QueryState":
        return self._replace(weekend_only=enabled, page_number=1)

    def toggle_category(self, category: str) -> "QueryState":
        return self._replace(categories=_toggle(self.categories, category), page_number=1)

    def toggle_language(self, language: str) -> "QueryState":
        return self._replace(languages=_toggle(self.languages, language), page_number=1)

    def sort_by(self, field: str) -> "QueryState":
        if field == self.sort_field:
            order = "desc" if self.sort_order == "asc" else "asc"
            return self._replace(sort_order=order, page_number=1)
        return self._replace(sort_field=field, sort_order="asc", page_number=1)

    def with_page_size(self, page_size: int) -> "QueryState":
        return self._replace(page_size=page_size, page_number=1)

    def go_to_page(self, page_number: int, total_pages: int) -> "QueryState":
        last = max(total_pages, 1)
        return self._replace(page_number=min(max(page_number, 1), last))

    def reset(self) -> "QueryState":
        return QueryState(page_size=self.page_size)


def _toggle(selected: Tuple[str, ...], value: str) -> Tuple[str, ...]:
    if value in selected:
        return tuple(v for v in selected if v != value)
    return selected + (value,)


class SearchResult(BaseModel):
    items: List[ProfessionalRecord] = Field(default_factory=list)
    total_count: int = 0
    total_pages: int = 0
    page_number: int = 1
    page_size: int = Config.DEFAULT_PAGE_SIZE
    sort_field: SortField = "name"
    sort_order: SortOrder = "asc"
    error: Optional[str] = None
