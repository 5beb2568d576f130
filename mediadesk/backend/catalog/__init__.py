"""Client-side catalog querying, relevance search and display formatting."""

from mediadesk.backend.catalog.query import (
    ALL_CATEGORIES,
    QueryState,
    SortKey,
    apply,
    available_categories,
)
from mediadesk.backend.catalog.search import SearchOrder, SearchResult, search_catalog

__all__ = [
    "ALL_CATEGORIES",
    "QueryState",
    "SearchOrder",
    "SearchResult",
    "SortKey",
    "apply",
    "available_categories",
    "search_catalog",
]
