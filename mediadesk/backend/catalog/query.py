"""Client-side catalog filtering and ordering."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Sequence

from mediadesk.backend.catalog.normalize import (
    parse_duration_seconds,
    parse_publish_timestamp,
    parse_rating,
    parse_view_count,
)
from mediadesk.backend.content.models import MediaItem

ALL_CATEGORIES = "all"


class SortKey(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    POPULAR = "popular"
    RATING = "rating"
    DURATION = "duration"


@dataclass(frozen=True)
class QueryState:
    search_text: str = ""
    category_filter: str = ALL_CATEGORIES
    sort_key: SortKey = SortKey.NEWEST


# key function, descending?
_ORDERINGS: dict[SortKey, tuple[Callable[[MediaItem], float], bool]] = {
    SortKey.NEWEST: (lambda item: parse_publish_timestamp(item.publish_date), True),
    SortKey.OLDEST: (lambda item: parse_publish_timestamp(item.publish_date), False),
    SortKey.POPULAR: (lambda item: parse_view_count(item.view_count), True),
    SortKey.RATING: (lambda item: parse_rating(item.rating), True),
    SortKey.DURATION: (lambda item: parse_duration_seconds(item.duration), True),
}


def matches_search(item: MediaItem, search_text: str) -> bool:
    """Literal, case-insensitive substring match on title or description."""

    if not search_text:
        return True
    needle = search_text.casefold()
    return needle in item.title.casefold() or needle in (item.description or "").casefold()


def apply(items: Sequence[MediaItem], query: QueryState) -> list[MediaItem]:
    """Return the view of ``items`` selected and ordered by ``query``.

    The input is never mutated. Items with equal sort keys keep their
    original relative order.
    """

    view: Iterable[MediaItem] = items
    if query.search_text:
        view = [item for item in view if matches_search(item, query.search_text)]
    if query.category_filter != ALL_CATEGORIES:
        view = [item for item in view if item.category == query.category_filter]

    key, descending = _ORDERINGS[SortKey(query.sort_key)]
    # sorted() is stable for reverse=True as well
    return sorted(view, key=key, reverse=descending)


def available_categories(items: Iterable[MediaItem]) -> list[str]:
    """Distinct non-empty categories in first-seen order."""

    seen: dict[str, None] = {}
    for item in items:
        if item.category:
            seen.setdefault(item.category, None)
    return list(seen)
