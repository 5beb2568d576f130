"""Content API records and the normalized media model.

The content API speaks camelCase JSON with Mongo style ``_id`` keys. The wire
records below mirror that payload, and :class:`MediaModelFacade` adapts them
into :class:`MediaItem`, the single shape consumed by the catalog query engine,
the relevance search and the player controller.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, Optional, Sequence, TypeVar, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from mediadesk.backend.common.errors import ContentUnavailable
from mediadesk.backend.common.logging import get_logger


log = get_logger(__name__)

T = TypeVar("T")

ViewCount = Union[int, str]
PublishDate = Union[str, int, float]


class MediaType(str, Enum):
    """Content types served by the public API."""

    ARTICLE = "article"
    VIDEO = "video"
    TVSHOW = "tvshow"
    PODCAST = "podcast"


class MediaItem(BaseModel):
    """Normalized record shared by every content type.

    ``id`` is the only identity; no two items of one catalog share it.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: Optional[str] = None
    category: str = ""
    media_type: Optional[MediaType] = None
    duration: Optional[str] = Field(default=None, description="M:SS or H:MM:SS")
    publish_date: Optional[PublishDate] = Field(
        default=None,
        description="ISO-8601 string or epoch milliseconds",
    )
    view_count: Optional[ViewCount] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    is_featured: bool = False
    is_new: bool = False
    external_media_url: Optional[str] = None
    person: Optional[str] = Field(default=None, description="Author, creator, host or guest")
    tags: Optional[str] = None
    thumbnail: Optional[str] = None


# ----------------------------------------------------------------------
# Wire records
# ----------------------------------------------------------------------

class _LenientModel(BaseModel):
    """Treats an explicit JSON ``null`` like a missing key for defaulted fields."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _null_means_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is not None or info.field_name is None:
            return value
        field = cls.model_fields[info.field_name]
        if field.is_required():
            return value
        default = field.get_default(call_default_factory=True)
        return value if default is None else default


class _WireModel(_LenientModel):
    mongo_id: Optional[str] = Field(default=None, alias="_id")
    id: Optional[str] = None

    @property
    def key(self) -> str:
        return self.mongo_id or self.id or ""


class PublicArticle(_WireModel):
    title: str
    subtitle: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    author: str = ""
    author_bio: Optional[str] = Field(default=None, alias="authorBio")
    category: Optional[str] = None
    category_name: Optional[str] = Field(default=None, alias="categoryName")
    featured: bool = False
    trending: bool = False
    publish_date: Optional[str] = Field(default=None, alias="publishDate")
    views: ViewCount = 0
    read_time: Optional[str] = Field(default=None, alias="readTime")
    tags: Optional[str] = None
    featured_image: Optional[str] = None
    featured_image_url: Optional[str] = Field(default=None, alias="featuredImage")
    featured_image_alt: Optional[str] = Field(default=None, alias="featuredImageAlt")
    allow_comments: bool = Field(default=True, alias="allowComments")


class PublicVideo(_WireModel):
    title: str
    description: Optional[str] = None
    category: str = ""
    featured: bool = False
    youtube_url: Optional[str] = None
    thumbnail: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration: Optional[str] = None
    views: ViewCount = 0
    creator: Optional[str] = None
    upload_date: Optional[str] = None
    tags: Optional[str] = None
    transcript: Optional[str] = None
    meta_description: Optional[str] = None


class PublicTVShow(_WireModel):
    title: str
    description: Optional[str] = None
    category: str = ""
    section: Optional[str] = None
    season_id: Optional[str] = None
    episode_number: Optional[int] = None
    featured: bool = False
    is_new: bool = False
    youtube_url: Optional[str] = None
    thumbnail: Optional[str] = None
    duration: Optional[str] = None
    views: ViewCount = 0
    upload_date: Optional[str] = None
    tags: Optional[str] = None
    meta_description: Optional[str] = None
    rating: Optional[float] = None
    likes: Optional[int] = None
    comments_count: Optional[int] = None


class PublicPodcast(_WireModel):
    title: str
    description: Optional[str] = None
    category: str = ""
    featured: bool = False
    youtube_url: Optional[str] = None
    thumbnail: Optional[str] = None
    duration: Optional[str] = None
    views: ViewCount = 0
    publish_date: Optional[str] = None
    tags: Optional[str] = None
    host: Optional[str] = None
    guest_name: Optional[str] = None
    rating: Optional[float] = None


class PaginationInfo(_LenientModel):
    current_page: int = Field(default=1, alias="currentPage")
    total_pages: int = Field(default=1, alias="totalPages")
    has_more: bool = Field(default=False, alias="hasMore")
    total_articles: Optional[int] = Field(default=None, alias="totalArticles")
    total_videos: Optional[int] = Field(default=None, alias="totalVideos")
    total_shows: Optional[int] = Field(default=None, alias="totalShows")
    total_podcasts: Optional[int] = Field(default=None, alias="totalPodcasts")

    @property
    def total(self) -> Optional[int]:
        for value in (self.total_articles, self.total_videos, self.total_shows, self.total_podcasts):
            if value is not None:
                return value
        return None


class _Page(_LenientModel):
    pagination: Optional[PaginationInfo] = None

    @field_validator("articles", "videos", "tv_shows", "podcasts", mode="before", check_fields=False)
    @classmethod
    def _skip_broken_records(cls, value: Any, info: ValidationInfo) -> Any:
        """Drop records that cannot be read instead of failing the whole page."""

        if not isinstance(value, list) or info.field_name is None:
            return value
        record_model = get_args(cls.model_fields[info.field_name].annotation)[0]
        records = []
        for raw in value:
            try:
                records.append(record_model.model_validate(raw))
            except ValidationError as exc:
                log.warning(
                    "content_record_skipped",
                    extra={"collection": info.field_name, "errors": exc.error_count()},
                )
        return records


class ArticlePage(_Page):
    articles: list[PublicArticle] = Field(default_factory=list)


class VideoPage(_Page):
    videos: list[PublicVideo] = Field(default_factory=list)


class TVShowPage(_Page):
    tv_shows: list[PublicTVShow] = Field(default_factory=list, alias="tvShows")


class PodcastPage(_Page):
    podcasts: list[PublicPodcast] = Field(default_factory=list)


class ApiResponse(BaseModel, Generic[T]):
    """The ``{success, data, message}`` envelope wrapping every API answer."""

    success: bool
    data: Optional[T] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.success and self.data is not None

    def unwrap(self) -> T:
        if not self.ok:
            raise ContentUnavailable(self.message or "Content unavailable")
        return self.data  # type: ignore[return-value]

    @classmethod
    def unavailable(cls, message: str) -> "ApiResponse[Any]":
        return cls(success=False, message=message)


# ----------------------------------------------------------------------
# Facade
# ----------------------------------------------------------------------

WireRecord = Union[PublicArticle, PublicVideo, PublicTVShow, PublicPodcast]


class MediaModelFacade:
    """Adapts wire records into :class:`MediaItem` instances."""

    def article(self, record: PublicArticle) -> MediaItem:
        return MediaItem(
            id=record.key,
            title=record.title,
            description=record.excerpt or record.subtitle,
            category=record.category_name or record.category or "",
            media_type=MediaType.ARTICLE,
            publish_date=record.publish_date,
            view_count=record.views,
            is_featured=record.featured,
            person=record.author or None,
            tags=record.tags,
            thumbnail=record.featured_image_url or record.featured_image,
        )

    def video(self, record: PublicVideo) -> MediaItem:
        return MediaItem(
            id=record.key,
            title=record.title,
            description=record.description,
            category=record.category,
            media_type=MediaType.VIDEO,
            duration=record.duration,
            publish_date=record.upload_date,
            view_count=record.views,
            is_featured=record.featured,
            external_media_url=record.youtube_url,
            person=record.creator,
            tags=record.tags,
            thumbnail=record.thumbnail_url or record.thumbnail,
        )

    def tv_show(self, record: PublicTVShow) -> MediaItem:
        return MediaItem(
            id=record.key,
            title=record.title,
            description=record.description,
            category=record.category,
            media_type=MediaType.TVSHOW,
            duration=record.duration,
            publish_date=record.upload_date,
            view_count=record.views,
            rating=_valid_rating(record.rating),
            is_featured=record.featured,
            is_new=record.is_new,
            external_media_url=record.youtube_url,
            tags=record.tags,
            thumbnail=record.thumbnail,
        )

    def podcast(self, record: PublicPodcast) -> MediaItem:
        people = [name for name in (record.host, record.guest_name) if name]
        return MediaItem(
            id=record.key,
            title=record.title,
            description=record.description,
            category=record.category,
            media_type=MediaType.PODCAST,
            duration=record.duration,
            publish_date=record.publish_date,
            view_count=record.views,
            rating=_valid_rating(record.rating),
            is_featured=record.featured,
            external_media_url=record.youtube_url,
            person=", ".join(people) or None,
            tags=record.tags,
            thumbnail=record.thumbnail,
        )

    def media_item(self, record: WireRecord) -> MediaItem:
        if isinstance(record, PublicArticle):
            return self.article(record)
        if isinstance(record, PublicVideo):
            return self.video(record)
        if isinstance(record, PublicTVShow):
            return self.tv_show(record)
        if isinstance(record, PublicPodcast):
            return self.podcast(record)
        raise TypeError(f"Unsupported record type: {type(record).__name__}")

    def media_items(self, records: Sequence[WireRecord]) -> list[MediaItem]:
        """Convert records, skipping those without an identifier."""

        return [self.media_item(record) for record in records if record.key]


def _valid_rating(value: Optional[float]) -> Optional[float]:
    if value is None or not 0 <= value <= 5:
        return None
    return value
