"""Tests for the catalog query engine."""

import pytest
from conftest import make_item

from mediadesk.backend.catalog.query import (
    QueryState,
    SortKey,
    apply,
    available_categories,
    matches_search,
)


@pytest.fixture
def episodes():
    """Episodes with distinct dates, views and ratings."""
    return [
        make_item("e1", title="Alpha", description="contains zeta", category="Research World",
                  publish_date="2024-01-10", view_count="1K", rating=4.1, duration="45:00"),
        make_item("e2", title="Beta", description="plain", category="Tech Trends",
                  publish_date="2024-03-05T12:00:00Z", view_count="10K", rating=4.9, duration="58:00"),
        make_item("e3", title="Gamma", description=None, category="Tech Trends",
                  publish_date="2023-12-24", view_count="2K", rating=None, duration="1:02:00"),
    ]


class TestDefaults:
    """Tests for the default query."""

    def test_defaults(self) -> None:
        query = QueryState()
        assert query.search_text == ""
        assert query.category_filter == "all"
        assert query.sort_key is SortKey.NEWEST

    @pytest.mark.parametrize("sort_key", list(SortKey))
    def test_no_filters_keeps_every_item(self, episodes, sort_key) -> None:
        result = apply(episodes, QueryState(sort_key=sort_key))
        assert len(result) == len(episodes)
        assert {item.id for item in result} == {item.id for item in episodes}

    def test_empty_input(self) -> None:
        assert apply([], QueryState(search_text="x", category_filter="Tech Trends")) == []

    def test_does_not_mutate_input(self, episodes) -> None:
        original = list(episodes)
        apply(episodes, QueryState(sort_key=SortKey.POPULAR))
        assert episodes == original


class TestSearch:
    """Tests for free-text search."""

    def test_matches_description_only(self, episodes) -> None:
        result = apply(episodes, QueryState(search_text="zeta"))
        assert [item.id for item in result] == ["e1"]

    def test_case_insensitive(self, episodes) -> None:
        result = apply(episodes, QueryState(search_text="bEtA"))
        assert [item.id for item in result] == ["e2"]

    def test_regex_characters_are_literal(self) -> None:
        items = [
            make_item("x", title="C++ (basics)"),
            make_item("y", title="Cxx basics"),
        ]
        result = apply(items, QueryState(search_text="c++ ("))
        assert [item.id for item in result] == ["x"]
        assert apply(items, QueryState(search_text=".*")) == []

    def test_missing_description_is_not_an_error(self, episodes) -> None:
        assert matches_search(episodes[2], "zeta") is False

    def test_unicode_folding(self) -> None:
        items = [make_item("s", title="Die Straße")]
        assert [i.id for i in apply(items, QueryState(search_text="STRASSE"))] == ["s"]


class TestCategory:
    """Tests for the category filter."""

    def test_exact_match(self, episodes) -> None:
        result = apply(episodes, QueryState(category_filter="Tech Trends"))
        assert [item.id for item in result] == ["e2", "e3"]

    def test_case_sensitive(self, episodes) -> None:
        assert apply(episodes, QueryState(category_filter="tech trends")) == []

    def test_no_match_returns_empty(self, episodes) -> None:
        assert apply(episodes, QueryState(category_filter="E! Corner")) == []

    def test_search_and_category_combine(self, episodes) -> None:
        result = apply(episodes, QueryState(search_text="a", category_filter="Tech Trends"))
        assert [item.id for item in result] == ["e2", "e3"]


class TestSort:
    """Tests for each sort key."""

    def test_newest(self, episodes) -> None:
        result = apply(episodes, QueryState(sort_key=SortKey.NEWEST))
        assert [item.id for item in result] == ["e2", "e1", "e3"]

    def test_oldest_is_reverse_of_newest(self, episodes) -> None:
        newest = apply(episodes, QueryState(sort_key=SortKey.NEWEST))
        oldest = apply(episodes, QueryState(sort_key=SortKey.OLDEST))
        assert oldest == list(reversed(newest))

    def test_popular_normalizes_k_suffix(self, episodes) -> None:
        result = apply(episodes, QueryState(sort_key=SortKey.POPULAR))
        assert [item.view_count for item in result] == ["10K", "2K", "1K"]

    def test_popular_mixes_ints_and_strings(self) -> None:
        items = [
            make_item("a", view_count=1500),
            make_item("b", view_count="1.2K"),
            make_item("c", view_count="lots"),
        ]
        result = apply(items, QueryState(sort_key=SortKey.POPULAR))
        assert [item.id for item in result] == ["a", "b", "c"]

    def test_rating_treats_missing_as_zero(self, episodes) -> None:
        result = apply(episodes, QueryState(sort_key=SortKey.RATING))
        assert [item.id for item in result] == ["e2", "e1", "e3"]

    def test_duration_longest_first(self, episodes) -> None:
        result = apply(episodes, QueryState(sort_key=SortKey.DURATION))
        assert [item.id for item in result] == ["e3", "e2", "e1"]

    def test_invalid_dates_sort_as_oldest(self) -> None:
        items = [
            make_item("bad", publish_date="not a date"),
            make_item("good", publish_date="2020-01-01"),
            make_item("none"),
        ]
        result = apply(items, QueryState(sort_key=SortKey.NEWEST))
        assert result[0].id == "good"

    def test_stable_for_equal_keys(self) -> None:
        items = [make_item(str(i), view_count="1K") for i in range(5)]
        for key in (SortKey.POPULAR, SortKey.NEWEST, SortKey.OLDEST, SortKey.RATING):
            result = apply(items, QueryState(sort_key=key))
            assert [item.id for item in result] == ["0", "1", "2", "3", "4"]

    def test_accepts_plain_string_sort_key(self, episodes) -> None:
        result = apply(episodes, QueryState(sort_key="oldest"))
        assert result[0].id == "e3"


class TestAvailableCategories:
    """Tests for the category vocabulary helper."""

    def test_first_seen_order_without_blanks(self, episodes) -> None:
        items = [*episodes, make_item("z", category="")]
        assert available_categories(items) == ["Research World", "Tech Trends"]
