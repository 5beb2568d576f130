"""In-memory snapshot of the public catalog."""

from __future__ import annotations

import threading
from typing import Callable, Optional, Sequence, TypeVar

from mediadesk.backend.common.logging import get_logger
from mediadesk.backend.common.tasks import TaskRunner, TaskSpec
from mediadesk.backend.content.models import (
    ApiResponse,
    MediaItem,
    MediaModelFacade,
    MediaType,
    PublicArticle,
    PublicPodcast,
    PublicTVShow,
    PublicVideo,
)
from mediadesk.backend.content.public_api import PublicAPI

log = get_logger(__name__)

R = TypeVar("R", PublicArticle, PublicVideo, PublicTVShow, PublicPodcast)

DEFAULT_COLLECTION_LIMIT = 50


class PublicDataStore:
    """Loads every collection once and serves lookups from memory.

    A collection whose request fails is replaced by an empty list; the other
    collections are unaffected.
    """

    def __init__(
        self,
        api: Optional[PublicAPI] = None,
        *,
        task_runner: Optional[TaskRunner] = None,
        facade: Optional[MediaModelFacade] = None,
        limit: int = DEFAULT_COLLECTION_LIMIT,
    ) -> None:
        self._api = api or PublicAPI()
        self._task_runner = task_runner
        self._facade = facade or MediaModelFacade()
        self._limit = limit
        self._lock = threading.Lock()
        self._articles: list[PublicArticle] = []
        self._videos: list[PublicVideo] = []
        self._tv_shows: list[PublicTVShow] = []
        self._podcasts: list[PublicPodcast] = []
        self._is_loading = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def refresh(self) -> None:
        with self._lock:
            self._is_loading = True
        try:
            if self._task_runner is not None:
                articles, videos, tv_shows, podcasts = self._fetch_concurrently(self._task_runner)
            else:
                with TaskRunner(max_workers=4, context="public_data") as runner:
                    articles, videos, tv_shows, podcasts = self._fetch_concurrently(runner)
        finally:
            with self._lock:
                self._is_loading = False

        with self._lock:
            self._articles = articles
            self._videos = videos
            self._tv_shows = tv_shows
            self._podcasts = podcasts
        log.info(
            "public_data_refreshed",
            extra={
                "articles": len(articles),
                "videos": len(videos),
                "tv_shows": len(tv_shows),
                "podcasts": len(podcasts),
            },
        )

    def _fetch_concurrently(self, runner: TaskRunner):  # noqa: ANN202
        limit = self._limit
        futures = [
            runner.submit(TaskSpec(fn=self._load, args=(lambda: self._api.get_articles(limit=limit), "articles"), name="fetch_articles")),
            runner.submit(TaskSpec(fn=self._load, args=(lambda: self._api.get_videos(limit=limit), "videos"), name="fetch_videos")),
            runner.submit(TaskSpec(fn=self._load, args=(lambda: self._api.get_tv_shows(limit=limit), "tv_shows"), name="fetch_tv_shows")),
            runner.submit(TaskSpec(fn=self._load, args=(lambda: self._api.get_podcasts(limit=limit), "podcasts"), name="fetch_podcasts")),
        ]
        return tuple(future.result() for future in futures)

    @staticmethod
    def _load(fetch: Callable[[], ApiResponse], attribute: str) -> list:
        response = fetch()
        if not response.ok:
            log.warning("collection_unavailable", extra={"collection": attribute, "reason": response.message})
            return []
        return list(getattr(response.data, attribute))

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------
    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def articles(self) -> list[PublicArticle]:
        return list(self._articles)

    @property
    def videos(self) -> list[PublicVideo]:
        return list(self._videos)

    @property
    def tv_shows(self) -> list[PublicTVShow]:
        return list(self._tv_shows)

    @property
    def podcasts(self) -> list[PublicPodcast]:
        return list(self._podcasts)

    @property
    def featured_articles(self) -> list[PublicArticle]:
        return [article for article in self._articles if article.featured]

    @property
    def trending_articles(self) -> list[PublicArticle]:
        return [article for article in self._articles if article.trending]

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def get_article_by_id(self, item_id: str) -> Optional[PublicArticle]:
        return _find(self._articles, item_id)

    def get_video_by_id(self, item_id: str) -> Optional[PublicVideo]:
        return _find(self._videos, item_id)

    def get_tv_show_by_id(self, item_id: str) -> Optional[PublicTVShow]:
        return _find(self._tv_shows, item_id)

    def get_podcast_by_id(self, item_id: str) -> Optional[PublicPodcast]:
        return _find(self._podcasts, item_id)

    # ------------------------------------------------------------------
    # Normalized views
    # ------------------------------------------------------------------
    def catalog(self, media_type: MediaType) -> list[MediaItem]:
        records: Sequence = {
            MediaType.ARTICLE: self._articles,
            MediaType.VIDEO: self._videos,
            MediaType.TVSHOW: self._tv_shows,
            MediaType.PODCAST: self._podcasts,
        }[MediaType(media_type)]
        return self._facade.media_items(records)

    def all_items(self) -> list[MediaItem]:
        items: list[MediaItem] = []
        for media_type in MediaType:
            items.extend(self.catalog(media_type))
        return items

    def find_item(self, item_id: str) -> Optional[MediaItem]:
        """Resolve an id across every collection, e.g. for the player."""

        for item in self.all_items():
            if item.id == item_id:
                return item
        return None


def _find(records: Sequence[R], item_id: str) -> Optional[R]:
    for record in records:
        if record.mongo_id == item_id or record.id == item_id:
            return record
    return None
