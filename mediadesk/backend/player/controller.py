from __future__ import annotations

"""Playback state machine for the embedded web player."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional, Protocol
import threading

from mediadesk.backend.catalog.formatting import format_clock, youtube_video_id
from mediadesk.backend.catalog.normalize import parse_duration_seconds
from mediadesk.backend.common.logging import get_logger
from mediadesk.backend.common.tasks import ScheduledTask, Scheduler, TimerScheduler
from mediadesk.backend.content.models import MediaItem
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
from mediadesk.config.settings import DEFAULT_PLAYER_ORIGIN, Settings, get_settings

log = get_logger(__name__)

ItemResolver = Callable[[str], Optional[MediaItem]]


class PlayerTransport(Protocol):
    """Fire-and-forget channel to the player frame."""

    def post(self, message: str) -> None: ...


class PlayerStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass(slots=True)
class PlaybackState:
    status: PlayerStatus = PlayerStatus.IDLE
    active_item_id: Optional[str] = None
    is_playing: bool = False
    current_time_seconds: float = 0.0
    duration_seconds: float = 0.0
    duration_confirmed: bool = False
    last_error: Optional[str] = None


class PlayerSyncController:
    """Keeps one "now playing" slot in step with an embedded player.

    The player is reachable only through outbound commands that are never
    acknowledged and inbound events that may be late, missing or foreign.
    ``is_playing`` and the reported times change only on inbound events; the
    status follows user intent immediately. The progress poll runs exactly
    while the status is ``playing``.
    """

    def __init__(
        self,
        transport: PlayerTransport,
        resolve_item: ItemResolver,
        *,
        scheduler: Optional[Scheduler] = None,
        trusted_origin: str = DEFAULT_PLAYER_ORIGIN,
        poll_interval: float = 1.0,
        load_timeout: Optional[float] = None,
    ) -> None:
        if poll_interval <= 0:
            raise PlayerError("poll_interval must be positive")
        self._transport = transport
        self._resolve_item = resolve_item
        self._scheduler = scheduler or TimerScheduler()
        self._trusted_origin = trusted_origin
        self._poll_interval = poll_interval
        self._load_timeout = load_timeout
        self._lock = threading.RLock()
        self._state = PlaybackState()
        self._active_video_id: Optional[str] = None
        self._poll_task: Optional[ScheduledTask] = None
        self._load_timer: Optional[ScheduledTask] = None
        self._generation = 0
        self._disposed = False

    @classmethod
    def from_settings(
        cls,
        transport: PlayerTransport,
        resolve_item: ItemResolver,
        *,
        scheduler: Optional[Scheduler] = None,
        settings: Optional[Settings] = None,
    ) -> "PlayerSyncController":
        cfg = settings or get_settings()
        return cls(
            transport,
            resolve_item,
            scheduler=scheduler,
            trusted_origin=cfg.player_origin,
            poll_interval=cfg.poll_interval,
            load_timeout=cfg.load_timeout,
        )

    # ------------------------------------------------------------------
    # User intent
    # ------------------------------------------------------------------
    def request_play(self, item_id: str) -> bool:
        """Play ``item_id``, or toggle pause/play when it is already loaded.

        Returns ``False`` when the request was ignored.
        """

        with self._lock:
            if self._disposed:
                log.debug("player_request_after_dispose", extra={"item_id": item_id})
                return False

            state = self._state
            if state.active_item_id == item_id and state.status is not PlayerStatus.IDLE:
                if state.status is PlayerStatus.PAUSED:
                    self._send(PlayerCommand.PLAY)
                    self._transition(PlayerStatus.PLAYING)
                else:
                    self._send(PlayerCommand.PAUSE)
                    self._transition(PlayerStatus.PAUSED)
                return True

            item = self._resolve_item(item_id)
            if item is None:
                log.warning("player_unknown_item", extra={"item_id": item_id})
                return False
            video_id = youtube_video_id(item.external_media_url)
            if video_id is None:
                log.warning("player_item_not_playable", extra={"item_id": item_id, "url": item.external_media_url})
                return False

            # loadVideoById replaces whatever the frame had loaded
            self._send(PlayerCommand.LOAD, [video_id, 0])
            self._stop_polling()
            self._cancel_load_timer()

            self._generation += 1
            self._active_video_id = video_id
            self._state = PlaybackState(
                status=PlayerStatus.LOADING,
                active_item_id=item_id,
                duration_seconds=parse_duration_seconds(item.duration),
            )
            self._arm_load_timer(self._generation)
            log.info("player_loading", extra={"item_id": item_id, "video_id": video_id})
            return True

    # ------------------------------------------------------------------
    # Inbound channel
    # ------------------------------------------------------------------
    def on_inbound_message(self, data: Any, origin: Optional[str]) -> PlayerEvent:
        event = decode_message(data, origin, self._trusted_origin)
        self.handle_event(event)
        return event

    def handle_event(self, event: PlayerEvent) -> None:
        with self._lock:
            if self._disposed:
                return
            self._apply(event)

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------
    def state(self) -> PlaybackState:
        with self._lock:
            return replace(self._state)

    @property
    def is_polling(self) -> bool:
        with self._lock:
            return self._poll_task is not None and self._poll_task.active

    def now_playing(self) -> Optional[MediaItem]:
        with self._lock:
            item_id = self._state.active_item_id
        return self._resolve_item(item_id) if item_id else None

    def progress_label(self) -> str:
        state = self.state()
        return f"{format_clock(state.current_time_seconds)} / {format_clock(state.duration_seconds)}"

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------
    def dispose(self) -> None:
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            self._stop_polling()
            self._cancel_load_timer()
        log.debug("player_disposed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _apply(self, event: PlayerEvent) -> None:
        if isinstance(event, Unrecognized):
            log.debug("player_message_discarded", extra={"reason": event.reason})
            return
        if self._state.active_item_id is None:
            return
        if event.video_id and event.video_id != self._active_video_id:
            log.debug("player_stale_event", extra={"video_id": event.video_id, "active": self._active_video_id})
            return

        if isinstance(event, StateChanged):
            self._apply_player_state(event.state, event.video_id)
            return

        if isinstance(event, InfoReport):
            if event.current_time is not None:
                self._state.current_time_seconds = event.current_time
            if event.duration is not None:
                self._state.duration_seconds = event.duration
                self._state.duration_confirmed = True
            if event.state is not None:
                self._apply_player_state(event.state, event.video_id)

    def _apply_player_state(self, code: PlayerStateCode, video_id: Optional[str]) -> None:
        if code is PlayerStateCode.PLAYING:
            self._state.is_playing = True
            self._transition(PlayerStatus.PLAYING)
        elif code is PlayerStateCode.PAUSED:
            self._state.is_playing = False
            self._transition(PlayerStatus.PAUSED)
        elif code is PlayerStateCode.ENDED:
            # an unattributed "ended" while loading belongs to the previous video
            if self._state.status is PlayerStatus.LOADING and video_id is None:
                log.debug("player_stale_event", extra={"reason": "ended_while_loading"})
                return
            self._reset()

    def _transition(self, status: PlayerStatus) -> None:
        previous = self._state.status
        self._state.status = status
        if status is PlayerStatus.PLAYING:
            self._start_polling()
        else:
            self._stop_polling()
        if status is not PlayerStatus.LOADING:
            self._cancel_load_timer()
        if previous is not status:
            log.debug(
                "player_transition",
                extra={"from": previous.value, "to": status.value, "item_id": self._state.active_item_id},
            )

    def _reset(self, *, error: Optional[str] = None) -> None:
        item_id = self._state.active_item_id
        self._transition(PlayerStatus.IDLE)
        self._state = PlaybackState(last_error=error)
        self._active_video_id = None
        log.info("player_idle", extra={"item_id": item_id, "error": error})

    def _send(self, command: PlayerCommand, args: Any = "") -> None:
        try:
            self._transport.post(encode_command(command, args))
        except Exception as exc:  # noqa: BLE001
            raise PlayerError(f"Unable to post {command.value} to player: {exc}") from exc

    # -------- progress poll --------

    def _start_polling(self) -> None:
        if self._poll_task is not None and self._poll_task.active:
            return
        self._poll_task = self._scheduler.call_every(self._poll_interval, self._poll, name="player_progress")

    def _stop_polling(self) -> None:
        task, self._poll_task = self._poll_task, None
        if task is not None:
            task.cancel()

    def _poll(self) -> None:
        with self._lock:
            if self._disposed or self._state.status is not PlayerStatus.PLAYING:
                return
            try:
                self._send(PlayerCommand.GET_CURRENT_TIME)
                self._send(PlayerCommand.GET_DURATION)
            except PlayerError as exc:
                log.warning("player_poll_failed", extra={"error": str(exc)})

    # -------- optional bounded wait --------

    def _arm_load_timer(self, generation: int) -> None:
        if self._load_timeout is None:
            return
        self._load_timer = self._scheduler.call_later(
            self._load_timeout,
            lambda: self._on_load_timeout(generation),
            name="player_load_timeout",
        )

    def _cancel_load_timer(self) -> None:
        timer, self._load_timer = self._load_timer, None
        if timer is not None:
            timer.cancel()

    def _on_load_timeout(self, generation: int) -> None:
        with self._lock:
            if self._disposed or generation != self._generation:
                return
            if self._state.status is not PlayerStatus.LOADING:
                return
            log.warning("player_load_timeout", extra={"item_id": self._state.active_item_id})
            self._reset(error="load_timeout")
