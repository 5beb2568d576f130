"""Total conversions from loosely typed catalog fields to sortable numbers.

None of these raise: anything that cannot be interpreted maps to ``0``.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any, Optional

_MINUTES_PATTERN = re.compile(r"^(\d+)\s*(?:m|min|mins|minute|minutes)$", re.IGNORECASE)
_VIEW_SUFFIXES = {"K": 1_000, "M": 1_000_000}
# fromisoformat before 3.11 only takes 3 or 6 fractional digits
_FRACTION_PATTERN = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def _finite_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string or epoch milliseconds into an aware datetime."""

    number = _finite_number(value)
    if number is not None:
        try:
            return datetime.fromtimestamp(number / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_PATTERN.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_publish_timestamp(value: Any) -> float:
    """Milliseconds since the epoch; unparseable dates sort as the epoch."""

    parsed = parse_datetime(value)
    if parsed is None:
        return 0.0
    return parsed.timestamp() * 1000.0


def parse_view_count(value: Any) -> int:
    """Normalize ``1234``, ``"1,234"``, ``"12.5K"`` or ``"2M"`` to an int."""

    number = _finite_number(value)
    if number is not None:
        return max(0, int(number))

    if not isinstance(value, str):
        return 0

    text = value.strip().replace(",", "").upper()
    multiplier = 1
    if text and text[-1] in _VIEW_SUFFIXES:
        multiplier = _VIEW_SUFFIXES[text[-1]]
        text = text[:-1].strip()

    try:
        parsed = float(text)
    except ValueError:
        return 0
    if not math.isfinite(parsed):
        return 0

    return max(0, int(round(parsed * multiplier)))


def parse_rating(value: Any) -> float:
    number = _finite_number(value)
    return number if number is not None else 0.0


def parse_duration_seconds(value: Any) -> float:
    """Seconds for ``M:SS``, ``H:MM:SS`` or ``"58 min"``; anything else is 0."""

    if not isinstance(value, str):
        return 0.0

    text = value.strip()
    match = _MINUTES_PATTERN.match(text)
    if match:
        return float(int(match.group(1)) * 60)

    parts = text.split(":")
    if len(parts) not in (2, 3) or not all(part.isascii() and part.isdigit() for part in parts):
        return 0.0

    numbers = [int(part) for part in parts]
    # every component after the leading one is a base-60 digit
    if any(n >= 60 for n in numbers[1:]):
        return 0.0

    seconds = 0
    for n in numbers:
        seconds = seconds * 60 + n
    return float(seconds)
