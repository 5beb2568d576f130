"""Weighted relevance search across every content type."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

from mediadesk.backend.catalog.normalize import parse_publish_timestamp, parse_view_count
from mediadesk.backend.catalog.query import ALL_CATEGORIES
from mediadesk.backend.content.models import MediaItem, MediaType

TITLE_WEIGHT = 10
TITLE_PREFIX_BONUS = 5
CATEGORY_WEIGHT = 5
PERSON_WEIGHT = 4
DESCRIPTION_WEIGHT = 3
TAGS_WEIGHT = 2


class SearchOrder(str, Enum):
    RELEVANCE = "relevance"
    DATE = "date"
    POPULARITY = "popularity"


@dataclass(frozen=True)
class SearchResult:
    item: MediaItem
    score: int


def _contains(haystack: Optional[str], needle: str) -> bool:
    return bool(haystack) and needle in haystack.casefold()


def relevance(item: MediaItem, query: str) -> int:
    if not query:
        return 0

    needle = query.casefold()
    score = 0
    if _contains(item.title, needle):
        score += TITLE_WEIGHT
        if item.title.casefold().startswith(needle):
            score += TITLE_PREFIX_BONUS
    if _contains(item.category, needle):
        score += CATEGORY_WEIGHT
    if _contains(item.description, needle):
        score += DESCRIPTION_WEIGHT
    if _contains(item.person, needle):
        score += PERSON_WEIGHT
    if _contains(item.tags, needle):
        score += TAGS_WEIGHT
    return score


def search_catalog(
    items: Iterable[MediaItem],
    query: str,
    *,
    media_type: Union[MediaType, str] = ALL_CATEGORIES,
    category: str = ALL_CATEGORIES,
    order: Union[SearchOrder, str] = SearchOrder.RELEVANCE,
) -> list[SearchResult]:
    """Score ``items`` against ``query`` and keep the positive matches.

    A blank query matches nothing.
    """

    if not query.strip():
        return []

    results = []
    for item in items:
        if media_type != ALL_CATEGORIES and item.media_type != MediaType(media_type):
            continue
        if category != ALL_CATEGORIES and item.category != category:
            continue
        score = relevance(item, query)
        if score > 0:
            results.append(SearchResult(item=item, score=score))

    order = SearchOrder(order)
    if order is SearchOrder.DATE:
        results.sort(key=lambda r: parse_publish_timestamp(r.item.publish_date), reverse=True)
    elif order is SearchOrder.POPULARITY:
        results.sort(key=lambda r: parse_view_count(r.item.view_count), reverse=True)
    else:
        results.sort(key=lambda r: r.score, reverse=True)
    return results
