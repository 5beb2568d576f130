"""Test fixtures and configuration."""

import json
from typing import Any, Optional

import pytest

from mediadesk.backend.common.tasks import ManualScheduler
from mediadesk.backend.content.models import MediaItem, MediaType
from mediadesk.backend.player.controller import PlayerSyncController

PLAYER_ORIGIN = "https://www.youtube.com"
VIDEO_A = "aaaaaaaaaaa"
VIDEO_B = "bbbbbbbbbbb"


def make_item(item_id: str, **overrides: Any) -> MediaItem:
    """Build a media item with sensible defaults."""
    fields: dict[str, Any] = {"id": item_id, "title": f"Title {item_id}", "category": "Tech Trends"}
    fields.update(overrides)
    return MediaItem(**fields)


class RecordingTransport:
    """Player transport that keeps every posted message."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def post(self, message: str) -> None:
        self.messages.append(message)

    @property
    def funcs(self) -> list[str]:
        return [json.loads(m)["func"] for m in self.messages]

    def clear(self) -> None:
        self.messages.clear()


@pytest.fixture
def catalog() -> dict[str, MediaItem]:
    """Two playable podcast episodes and one item without a video."""
    return {
        "A": make_item(
            "A",
            media_type=MediaType.PODCAST,
            duration="58:30",
            external_media_url=f"https://www.youtube.com/watch?v={VIDEO_A}",
        ),
        "B": make_item(
            "B",
            media_type=MediaType.PODCAST,
            duration="1:02:03",
            external_media_url=f"https://youtu.be/{VIDEO_B}",
        ),
        "N": make_item("N", media_type=MediaType.ARTICLE),
    }


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def controller(
    transport: RecordingTransport,
    scheduler: ManualScheduler,
    catalog: dict[str, MediaItem],
) -> PlayerSyncController:
    """Controller wired to a recording transport and a manual clock."""
    ctrl = PlayerSyncController(
        transport,
        catalog.get,
        scheduler=scheduler,
        trusted_origin=PLAYER_ORIGIN,
        poll_interval=1.0,
    )
    yield ctrl
    ctrl.dispose()


def state_message(code: int) -> str:
    return json.dumps({"event": "onStateChange", "info": code})


def info_message(video_id: Optional[str] = None, **info: Any) -> str:
    if video_id is not None:
        info["videoData"] = {"video_id": video_id}
    return json.dumps({"event": "infoDelivery", "info": info})
