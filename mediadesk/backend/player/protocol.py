from __future__ import annotations

"""Embedded player message protocol.

Outbound commands are JSON strings posted to the player frame. Inbound
messages arrive on a channel shared with other origins, so every message is
checked against the trusted origin and decoded into a closed set of events
before the controller sees it.
"""

import json
import math
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Mapping, Optional, Union


class PlayerCommand(str, Enum):
    PLAY = "playVideo"
    PAUSE = "pauseVideo"
    GET_CURRENT_TIME = "getCurrentTime"
    GET_DURATION = "getDuration"
    LOAD = "loadVideoById"


class PlayerStateCode(IntEnum):
    ENDED = 0
    PLAYING = 1
    PAUSED = 2


@dataclass(frozen=True)
class StateChanged:
    state: PlayerStateCode
    video_id: Optional[str] = None


@dataclass(frozen=True)
class InfoReport:
    current_time: Optional[float] = None
    duration: Optional[float] = None
    state: Optional[PlayerStateCode] = None
    video_id: Optional[str] = None


@dataclass(frozen=True)
class Unrecognized:
    reason: str


PlayerEvent = Union[StateChanged, InfoReport, Unrecognized]


def encode_command(command: Union[PlayerCommand, str], args: Any = "") -> str:
    return json.dumps({"event": "command", "func": PlayerCommand(command).value, "args": args})


def normalize_origin(origin: Optional[str]) -> str:
    return (origin or "").strip().rstrip("/").lower()


def decode_message(data: Any, origin: Optional[str], trusted_origin: str) -> PlayerEvent:
    """Decode one raw channel message; never raises."""

    if normalize_origin(origin) != normalize_origin(trusted_origin):
        return Unrecognized("untrusted_origin")

    if isinstance(data, (bytes, bytearray)):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError:
            return Unrecognized("invalid_encoding")
    if isinstance(data, str):
        try:
            payload = json.loads(data)
        except ValueError:
            return Unrecognized("invalid_json")
    else:
        payload = data

    if not isinstance(payload, Mapping):
        return Unrecognized("not_an_object")

    event = payload.get("event")
    info = payload.get("info")

    if event == "onStateChange":
        state = _state_code(info)
        if state is None:
            return Unrecognized("unsupported_state")
        return StateChanged(state=state)

    if event == "infoDelivery":
        if not isinstance(info, Mapping):
            return Unrecognized("invalid_info")
        report = InfoReport(
            current_time=_seconds(info.get("currentTime")),
            duration=_seconds(info.get("duration"), allow_zero=False),
            state=_state_code(info.get("playerState")),
            video_id=_video_id(info),
        )
        if report.current_time is None and report.duration is None and report.state is None:
            return Unrecognized("empty_info")
        return report

    return Unrecognized("unknown_event")


def _state_code(value: Any) -> Optional[PlayerStateCode]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    try:
        return PlayerStateCode(value)
    except ValueError:
        return None


def _seconds(value: Any, *, allow_zero: bool = True) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    if not math.isfinite(number) or number < 0 or (number == 0 and not allow_zero):
        return None
    return number


def _video_id(info: Mapping[str, Any]) -> Optional[str]:
    video_data = info.get("videoData")
    if isinstance(video_data, Mapping):
        value = video_data.get("video_id")
        if isinstance(value, str) and value:
            return value
    return None
