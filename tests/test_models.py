"""Tests for the content models and facade."""

import pytest
from pydantic import ValidationError

from mediadesk.backend.common.errors import ContentUnavailable
from mediadesk.backend.content.models import (
    ApiResponse,
    MediaItem,
    MediaModelFacade,
    MediaType,
    PaginationInfo,
    PublicArticle,
    PublicVideo,
    VideoPage,
)


class TestMediaItem:
    """Tests for the normalized record."""

    def test_rating_bounds(self) -> None:
        with pytest.raises(ValidationError):
            MediaItem(id="x", title="T", rating=6)

    def test_frozen(self) -> None:
        item = MediaItem(id="x", title="T")
        with pytest.raises(ValidationError):
            item.title = "Other"

    def test_view_count_accepts_int_or_string(self) -> None:
        assert MediaItem(id="x", title="T", view_count="12.5K").view_count == "12.5K"
        assert MediaItem(id="y", title="T", view_count=12).view_count == 12


class TestWireModels:
    """Tests for decoding the camelCase payloads."""

    def test_article_aliases(self) -> None:
        article = PublicArticle.model_validate(
            {"_id": "a1", "title": "T", "authorBio": "Writer", "readTime": "5 min", "unknownField": 1}
        )
        assert article.key == "a1"
        assert article.author_bio == "Writer"
        assert article.read_time == "5 min"
        assert article.allow_comments is True

    def test_key_falls_back_to_id(self) -> None:
        assert PublicVideo.model_validate({"id": "v1", "title": "T"}).key == "v1"
        assert PublicVideo.model_validate({"title": "T"}).key == ""

    def test_null_falls_back_to_field_default(self) -> None:
        article = PublicArticle.model_validate(
            {"_id": "a1", "title": "T", "author": None, "views": None, "trending": None, "allowComments": None}
        )
        assert article.author == ""
        assert article.views == 0
        assert article.trending is False
        assert article.allow_comments is True

    def test_null_collection_is_empty(self) -> None:
        assert VideoPage.model_validate({"videos": None}).videos == []

    def test_null_title_is_still_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PublicVideo.model_validate({"_id": "v1", "title": None})

    def test_pagination_total(self) -> None:
        info = PaginationInfo.model_validate({"currentPage": 2, "totalPages": 4, "totalVideos": 37})
        assert info.current_page == 2
        assert info.total == 37
        assert PaginationInfo().total is None

    def test_page_without_pagination(self) -> None:
        page = VideoPage.model_validate({"videos": [{"_id": "v1", "title": "T"}]})
        assert page.pagination is None
        assert len(page.videos) == 1


class TestApiResponse:
    """Tests for the response envelope."""

    def test_ok_requires_data(self) -> None:
        assert ApiResponse[VideoPage](success=True).ok is False

    def test_unwrap(self) -> None:
        response = ApiResponse[VideoPage](success=True, data=VideoPage())
        assert response.unwrap() == VideoPage()

    def test_unavailable(self) -> None:
        response = ApiResponse[VideoPage].unavailable("Failed to fetch videos")
        assert response.success is False
        with pytest.raises(ContentUnavailable, match="Failed to fetch videos"):
            response.unwrap()


class TestFacade:
    """Tests for wire record to MediaItem conversion."""

    def test_video(self) -> None:
        record = PublicVideo.model_validate(
            {
                "_id": "v1",
                "title": "Launch",
                "category": "Tech Trends",
                "youtube_url": "https://youtu.be/dQw4w9WgXcQ",
                "thumbnail": "small.jpg",
                "thumbnail_url": "large.jpg",
                "creator": "Studio",
                "upload_date": "2024-01-28",
                "views": "1K",
                "duration": "4:05",
            }
        )
        item = MediaModelFacade().media_item(record)
        assert item.media_type is MediaType.VIDEO
        assert item.external_media_url == "https://youtu.be/dQw4w9WgXcQ"
        assert item.thumbnail == "large.jpg"
        assert item.person == "Studio"
        assert item.publish_date == "2024-01-28"

    def test_article_prefers_category_name(self) -> None:
        record = PublicArticle.model_validate(
            {"_id": "a1", "title": "T", "category": "64f0", "categoryName": "Research World", "subtitle": "Sub"}
        )
        item = MediaModelFacade().article(record)
        assert item.category == "Research World"
        assert item.description == "Sub"
        assert item.person is None

    def test_rejects_unknown_record(self) -> None:
        with pytest.raises(TypeError):
            MediaModelFacade().media_item(object())
