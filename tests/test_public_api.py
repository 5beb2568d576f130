"""Tests for the public content API client."""

from unittest.mock import MagicMock

import pytest
import requests

from mediadesk.backend.common.errors import ContentUnavailable
from mediadesk.backend.content.public_api import PublicAPI
from mediadesk.backend.network_handlers.session import HttpSession, NotFound, Upstream5xx
from mediadesk.backend.network_handlers.url_manager import URLManager

BASE_URL = "http://api.test/api"


def _response(status: int = 200, payload=None, *, invalid_json: bool = False) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    if invalid_json:
        resp.json.side_effect = ValueError("Expecting value")
    else:
        resp.json.return_value = payload
    return resp


@pytest.fixture
def raw_session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def api(raw_session: MagicMock) -> PublicAPI:
    http = HttpSession(timeout=5.0, urlm=URLManager(base_url=BASE_URL), session=raw_session)
    return PublicAPI(http)


def requested_url(raw_session: MagicMock) -> str:
    return raw_session.request.call_args.kwargs["url"]


class TestRequests:
    """Tests for URL building and query parameters."""

    def test_articles_path_and_flags(self, api, raw_session) -> None:
        raw_session.request.return_value = _response(payload={"success": True, "data": {"articles": []}})

        api.get_articles(featured=True, limit=5)

        assert requested_url(raw_session) == f"{BASE_URL}/public/articles?featured=true&limit=5"
        assert raw_session.request.call_args.kwargs["timeout"] == 5.0
        assert raw_session.request.call_args.kwargs["headers"]["Accept"] == "application/json"

    def test_false_and_empty_params_are_omitted(self, api, raw_session) -> None:
        raw_session.request.return_value = _response(payload={"success": True, "data": {"videos": []}})

        api.get_videos(category="", featured=False)

        assert requested_url(raw_session) == f"{BASE_URL}/public/videos"

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("get_article", "/public/articles/a1"),
            ("get_video", "/public/videos/a1"),
            ("get_tv_show", "/public/tvshows/a1"),
            ("get_podcast", "/public/podcasts/a1"),
        ],
    )
    def test_single_record_paths(self, api, raw_session, method, path) -> None:
        raw_session.request.return_value = _response(payload={"success": True, "data": {"_id": "a1", "title": "T"}})

        response = getattr(api, method)("a1")

        assert requested_url(raw_session) == BASE_URL + path
        assert response.ok
        assert response.data.key == "a1"


class TestDecoding:
    """Tests for envelope decoding."""

    def test_tv_show_page(self, api, raw_session) -> None:
        raw_session.request.return_value = _response(
            payload={
                "success": True,
                "data": {
                    "tvShows": [{"_id": "t1", "title": "Late Night", "is_new": True, "rating": 4.2}],
                    "pagination": {"currentPage": 1, "totalPages": 3, "hasMore": True, "totalShows": 30},
                },
            }
        )

        response = api.get_tv_shows(limit=10)

        assert requested_url(raw_session) == f"{BASE_URL}/public/tvshows?limit=10"
        page = response.unwrap()
        assert page.tv_shows[0].key == "t1"
        assert page.tv_shows[0].is_new is True
        assert page.pagination.total == 30
        assert page.pagination.has_more is True

    def test_podcast_page_accepts_string_views(self, api, raw_session) -> None:
        raw_session.request.return_value = _response(
            payload={"success": True, "data": {"podcasts": [{"_id": "p1", "title": "Ep", "views": "12.5K"}]}}
        )

        page = api.get_podcasts().unwrap()

        assert page.podcasts[0].views == "12.5K"

    def test_null_fields_and_broken_records_do_not_fail_the_page(self, api, raw_session) -> None:
        raw_session.request.return_value = _response(
            payload={
                "success": True,
                "data": {
                    "videos": [
                        {"_id": "v1", "title": "Good", "category": "Tech Trends", "views": "1K"},
                        {"_id": "v2", "title": "Sloppy", "category": None, "views": None, "featured": None},
                        {"_id": "v3", "title": None},
                    ],
                    "pagination": {"currentPage": None, "totalVideos": 3},
                },
            }
        )

        response = api.get_videos()

        assert response.ok
        page = response.unwrap()
        assert [video.key for video in page.videos] == ["v1", "v2"]
        sloppy = page.videos[1]
        assert sloppy.category == ""
        assert sloppy.views == 0
        assert sloppy.featured is False
        assert page.pagination.current_page == 1

    def test_health_check(self, api, raw_session) -> None:
        raw_session.request.return_value = _response(payload={"success": True, "data": {"status": "ok"}})

        response = api.health_check()

        assert requested_url(raw_session) == f"{BASE_URL}/public/health"
        assert response.success is True


class TestFailures:
    """Every failure collapses into an unsuccessful response."""

    def test_timeout(self, api, raw_session) -> None:
        raw_session.request.side_effect = requests.exceptions.Timeout("slow")

        response = api.get_articles()

        assert response.success is False
        assert response.data is None
        assert response.message == "Failed to fetch articles"

    def test_connection_error(self, api, raw_session) -> None:
        raw_session.request.side_effect = requests.exceptions.ConnectionError("refused")
        assert api.get_podcast("p1").message == "Failed to fetch podcast"

    def test_server_error(self, api, raw_session) -> None:
        raw_session.request.return_value = _response(status=503)
        assert api.get_tv_shows().message == "Failed to fetch TV shows"

    def test_invalid_json(self, api, raw_session) -> None:
        raw_session.request.return_value = _response(invalid_json=True)
        assert api.get_videos().ok is False

    def test_malformed_envelope(self, api, raw_session) -> None:
        raw_session.request.return_value = _response(payload={"data": {"articles": []}})
        assert api.get_articles().ok is False

    def test_unsuccessful_envelope_is_passed_through(self, api, raw_session) -> None:
        raw_session.request.return_value = _response(payload={"success": False, "message": "Not published"})

        response = api.get_article("draft")

        assert response.ok is False
        assert response.message == "Not published"
        with pytest.raises(ContentUnavailable):
            response.unwrap()

    def test_health_check_failure(self, api, raw_session) -> None:
        raw_session.request.side_effect = requests.exceptions.ConnectionError("down")

        response = api.health_check()

        assert response.success is False
        assert response.message == "Health check failed"


class TestHttpSession:
    """Tests for the typed HTTP error mapping."""

    def test_not_found(self, raw_session) -> None:
        raw_session.request.return_value = _response(status=404)
        http = HttpSession(timeout=1.0, urlm=URLManager(base_url=BASE_URL), session=raw_session)
        with pytest.raises(NotFound):
            http.get("/public/articles/missing")

    def test_upstream_error(self, raw_session) -> None:
        raw_session.request.return_value = _response(status=502)
        http = HttpSession(timeout=1.0, urlm=URLManager(base_url=BASE_URL), session=raw_session)
        with pytest.raises(Upstream5xx):
            http.get("/public/articles")

    def test_allowed_status(self, raw_session) -> None:
        raw_session.request.return_value = _response(status=404)
        http = HttpSession(timeout=1.0, urlm=URLManager(base_url=BASE_URL), session=raw_session)
        assert http.get("/x", allowed_statuses={404}).status_code == 404
