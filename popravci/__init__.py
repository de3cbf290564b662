"""Search, filter and ranking engine for the Popravci majstori directory."""

from .exceptions import DirectoryError, FetchError
from .models import ProfessionalRecord, QueryState, SearchResult
from .search import DirectorySearchEngine, DirectorySnapshot, apply_query

__all__ = [
    "DirectoryError",
    "FetchError",
    "ProfessionalRecord",
    "QueryState",
    "SearchResult",
    "DirectorySearchEngine",
    "DirectorySnapshot",
    "apply_query",
]
