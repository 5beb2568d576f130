from __future__ import annotations

import math
import re
from typing import Any, Optional
from urllib.parse import urlencode

from mediadesk.backend.catalog.normalize import parse_datetime

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_YOUTUBE_ID = re.compile(r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")
YOUTUBE_EMBED_BASE = "https://www.youtube.com/embed/"


def format_date(value: Any) -> Optional[str]:
    """``"Jan 28, 2024"`` style display date, or ``None`` when unparseable."""

    parsed = parse_datetime(value)
    if parsed is None:
        return None
    return f"{_MONTHS[parsed.month - 1]} {parsed.day}, {parsed.year}"


def truncate_text(text: Optional[str], max_length: int = 150) -> Optional[str]:
    if not text or len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def youtube_video_id(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    match = _YOUTUBE_ID.match(url)
    if match and len(match.group(2)) == 11:
        return match.group(2)
    return None


def embed_url(video_id: str, *, autoplay: bool = False, origin: Optional[str] = None) -> str:
    """Embed URL with the JS API enabled so the player accepts postMessage commands."""

    params = {
        "enablejsapi": 1,
        "autoplay": 1 if autoplay else 0,
        "rel": 0,
        "modestbranding": 1,
    }
    if origin:
        params["origin"] = origin
    return f"{YOUTUBE_EMBED_BASE}{video_id}?{urlencode(params)}"


def format_clock(seconds: float) -> str:
    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
