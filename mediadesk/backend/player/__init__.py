"""Embedded player synchronization: wire protocol and playback state machine."""

from mediadesk.backend.player.controller import (
    PlaybackState,
    PlayerStatus,
    PlayerSyncController,
    PlayerTransport,
)
from mediadesk.backend.player.exceptions import PlayerError
from mediadesk.backend.player.protocol import (
    InfoReport,
    PlayerCommand,
    PlayerEvent,
    PlayerStateCode,
    StateChanged,
    Unrecognized,
    decode_message,
    encode_command,
)

__all__ = [
    "InfoReport",
    "PlaybackState",
    "PlayerCommand",
    "PlayerError",
    "PlayerEvent",
    "PlayerStateCode",
    "PlayerStatus",
    "PlayerSyncController",
    "PlayerTransport",
    "StateChanged",
    "Unrecognized",
    "decode_message",
    "encode_command",
]
