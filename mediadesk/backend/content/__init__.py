"""Public content API client, wire models and the in-memory data store."""

from mediadesk.backend.content.models import (
    ApiResponse,
    MediaItem,
    MediaModelFacade,
    MediaType,
    PaginationInfo,
    PublicArticle,
    PublicPodcast,
    PublicTVShow,
    PublicVideo,
)
from mediadesk.backend.content.public_api import PublicAPI
from mediadesk.backend.content.store import PublicDataStore

__all__ = [
    "ApiResponse",
    "MediaItem",
    "MediaModelFacade",
    "MediaType",
    "PaginationInfo",
    "PublicAPI",
    "PublicArticle",
    "PublicDataStore",
    "PublicPodcast",
    "PublicTVShow",
    "PublicVideo",
]
