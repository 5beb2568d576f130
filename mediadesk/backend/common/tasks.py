"""Lightweight task execution and cancellable timers."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, Future
from dataclasses import dataclass
from typing import Callable, Any, Optional, Protocol
import itertools
import threading
import time

from mediadesk.backend.common.errors import TaskError
from mediadesk.backend.common.logging import get_logger

log = get_logger(__name__)



@dataclass
class TaskSpec:
    fn: Callable[..., Any]
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = None
    retries: int = 0
    backoff_sec: float = 0.5
    name: str = "task"

    def __post_init__(self):
        if self.kwargs is None:
            self.kwargs = {}


class TaskRunner:
    """Tiny in-process task runner with retries/backoff."""
    def __init__(self, max_workers: int = 4, *, context: Optional[str] = None):
        self._context = context or "task_runner"
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix="mediadesk-task",
        )
        self._closed = False
        self._lock = threading.Lock()

    def submit(self, spec: TaskSpec) -> Future:
        if self._closed:
            raise TaskError("TaskRunner is closed")

        def _wrapped():
            attempt = 0
            while True:
                try:
                    log.debug("task_start", extra={"task": spec.name, "attempt": attempt})
                    result = spec.fn(*spec.args, **spec.kwargs)
                    log.debug("task_done", extra={"task": spec.name, "attempt": attempt})
                    return result
                except Exception as e:  # noqa: BLE001
                    if attempt >= spec.retries:
                        log.error("task_fail", extra={"task": spec.name, "attempt": attempt, "error": str(e)})
                        raise
                    sleep_for = spec.backoff_sec * (2 ** attempt)
                    log.warning(
                        "task_retry",
                        extra={"task": spec.name, "attempt": attempt, "sleep_for": sleep_for, "error": str(e)},
                    )
                    time.sleep(sleep_for)
                    attempt += 1

        return self._executor.submit(_wrapped)

    def close(self, wait: bool = True) -> None:
        with self._lock:
            if not self._closed:
                self._executor.shutdown(wait=wait, cancel_futures=not wait)
                self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close(wait=True)


# ----------------------------------------------------------------------
# Timers
# ----------------------------------------------------------------------

class ScheduledTask(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_every(self, interval: float, fn: Callable[[], Any], *, name: str = "periodic") -> ScheduledTask: ...

    def call_later(self, delay: float, fn: Callable[[], Any], *, name: str = "deferred") -> ScheduledTask: ...


class _TimerTask:
    """Re-arming ``threading.Timer`` that can be cancelled from any thread."""

    def __init__(self, interval: float, fn: Callable[[], Any], *, repeat: bool, name: str) -> None:
        self.interval = max(0.0, interval)
        self.name = name
        self._fn = fn
        self._repeat = repeat
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._cancelled = False

    @property
    def active(self) -> bool:
        return not self._cancelled

    def start(self) -> "_TimerTask":
        self._arm()
        return self

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _arm(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._timer = threading.Timer(self.interval, self._fire)
            self._timer.daemon = True
            self._timer.name = f"mediadesk-timer-{self.name}"
            self._timer.start()

    def _fire(self) -> None:
        if self._cancelled:
            return
        try:
            self._fn()
        except Exception:  # noqa: BLE001
            log.exception("timer_callback_failed", extra={"timer": self.name})
        if self._repeat:
            self._arm()
        else:
            self._cancelled = True


class TimerScheduler:
    """Scheduler backed by daemon ``threading.Timer`` threads."""

    def __init__(self) -> None:
        self._tasks: list[_TimerTask] = []
        self._lock = threading.Lock()

    def call_every(self, interval: float, fn: Callable[[], Any], *, name: str = "periodic") -> ScheduledTask:
        return self._track(_TimerTask(interval, fn, repeat=True, name=name).start())

    def call_later(self, delay: float, fn: Callable[[], Any], *, name: str = "deferred") -> ScheduledTask:
        return self._track(_TimerTask(delay, fn, repeat=False, name=name).start())

    def close(self) -> None:
        with self._lock:
            tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()

    def _track(self, task: _TimerTask) -> _TimerTask:
        with self._lock:
            self._tasks = [t for t in self._tasks if t.active]
            self._tasks.append(task)
        return task


class _ManualTask:
    def __init__(self, due: float, interval: float, fn: Callable[[], Any], *, repeat: bool, seq: int, name: str) -> None:
        self.due = due
        self.interval = interval
        self.fn = fn
        self.repeat = repeat
        self.seq = seq
        self.name = name
        self._cancelled = False

    @property
    def active(self) -> bool:
        return not self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualScheduler:
    """Deterministic scheduler driven by :meth:`advance`.

    Suits hosts that own their event loop and tick timers themselves, and
    tests that need exact control over elapsed time.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._tasks: list[_ManualTask] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if task.active)

    def call_every(self, interval: float, fn: Callable[[], Any], *, name: str = "periodic") -> ScheduledTask:
        if interval <= 0:
            raise TaskError("Periodic interval must be positive")
        return self._add(_ManualTask(self._now + interval, interval, fn, repeat=True, seq=next(self._seq), name=name))

    def call_later(self, delay: float, fn: Callable[[], Any], *, name: str = "deferred") -> ScheduledTask:
        delay = max(0.0, delay)
        return self._add(_ManualTask(self._now + delay, delay, fn, repeat=False, seq=next(self._seq), name=name))

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due callbacks in deadline order."""

        target = self._now + max(0.0, seconds)
        while True:
            due = [task for task in self._tasks if task.active and task.due <= target]
            if not due:
                break
            task = min(due, key=lambda t: (t.due, t.seq))
            self._now = task.due
            if task.repeat:
                task.due += task.interval
            else:
                task.cancel()
            task.fn()
        self._now = target
        self._tasks = [task for task in self._tasks if task.active]

    def _add(self, task: _ManualTask) -> _ManualTask:
        self._tasks.append(task)
        return task
