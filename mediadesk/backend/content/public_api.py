"""Read client for the public content API."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from mediadesk.backend.common.logging import get_logger
from mediadesk.backend.content.models import (
    ApiResponse,
    ArticlePage,
    PodcastPage,
    PublicArticle,
    PublicPodcast,
    PublicTVShow,
    PublicVideo,
    TVShowPage,
    VideoPage,
)
from mediadesk.backend.network_handlers.session import HttpSession, NetError

log = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class PublicAPI:
    """Typed wrapper around the ``/public`` endpoints.

    Every method returns an :class:`ApiResponse`. Transport failures, HTTP
    errors, undecodable bodies and malformed envelopes all collapse into the
    same ``success=False`` answer; the client never retries.
    """

    def __init__(self, session: Optional[HttpSession] = None) -> None:
        self._http = session or HttpSession()

    # ------------------------------------------------------------------
    # Articles
    # ------------------------------------------------------------------
    def get_articles(
        self,
        *,
        category: Optional[str] = None,
        featured: bool = False,
        trending: bool = False,
        limit: Optional[int] = None,
        page: Optional[int] = None,
    ) -> ApiResponse[ArticlePage]:
        params = {
            "category": category,
            "featured": featured,
            "trending": trending,
            "limit": limit,
            "page": page,
        }
        return self._fetch("/public/articles", ArticlePage, "articles", params=params)

    def get_article(self, article_id: str) -> ApiResponse[PublicArticle]:
        return self._fetch(f"/public/articles/{article_id}", PublicArticle, "article")

    # ------------------------------------------------------------------
    # Videos
    # ------------------------------------------------------------------
    def get_videos(
        self,
        *,
        category: Optional[str] = None,
        featured: bool = False,
        limit: Optional[int] = None,
        page: Optional[int] = None,
    ) -> ApiResponse[VideoPage]:
        params = {"category": category, "featured": featured, "limit": limit, "page": page}
        return self._fetch("/public/videos", VideoPage, "videos", params=params)

    def get_video(self, video_id: str) -> ApiResponse[PublicVideo]:
        return self._fetch(f"/public/videos/{video_id}", PublicVideo, "video")

    # ------------------------------------------------------------------
    # TV shows
    # ------------------------------------------------------------------
    def get_tv_shows(
        self,
        *,
        category: Optional[str] = None,
        featured: bool = False,
        limit: Optional[int] = None,
        page: Optional[int] = None,
    ) -> ApiResponse[TVShowPage]:
        params = {"category": category, "featured": featured, "limit": limit, "page": page}
        return self._fetch("/public/tvshows", TVShowPage, "TV shows", params=params)

    def get_tv_show(self, show_id: str) -> ApiResponse[PublicTVShow]:
        return self._fetch(f"/public/tvshows/{show_id}", PublicTVShow, "TV show")

    # ------------------------------------------------------------------
    # Podcasts
    # ------------------------------------------------------------------
    def get_podcasts(
        self,
        *,
        category: Optional[str] = None,
        featured: bool = False,
        limit: Optional[int] = None,
        page: Optional[int] = None,
    ) -> ApiResponse[PodcastPage]:
        params = {"category": category, "featured": featured, "limit": limit, "page": page}
        return self._fetch("/public/podcasts", PodcastPage, "podcasts", params=params)

    def get_podcast(self, podcast_id: str) -> ApiResponse[PublicPodcast]:
        return self._fetch(f"/public/podcasts/{podcast_id}", PublicPodcast, "podcast")

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------
    def health_check(self) -> ApiResponse[Any]:
        try:
            payload = self._http.get_json("/public/health")
            return ApiResponse[Any].model_validate(payload)
        except (NetError, ValidationError) as exc:
            log.error("health_check_failed", extra={"error": str(exc)})
            return ApiResponse[Any].unavailable("Health check failed")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _fetch(
        self,
        path: str,
        model: Type[M],
        what: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
    ) -> ApiResponse[M]:
        envelope = ApiResponse[model]  # type: ignore[valid-type]
        try:
            payload = self._http.get_json(path, params=params)
            return envelope.model_validate(payload)
        except (NetError, ValidationError) as exc:
            log.error("content_fetch_failed", extra={"path": path, "error": str(exc)})
            return envelope.unavailable(f"Failed to fetch {what}")
