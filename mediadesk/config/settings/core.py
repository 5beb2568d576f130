from __future__ import annotations

import math
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from mediadesk.backend.common.errors import ConfigError
from mediadesk.backend.common.logging import get_logger

log = get_logger(__name__)

_THIS_DIR = Path(__file__).resolve().parent
_PACKAGE_ROOT = _THIS_DIR.parent.parent  # mediadesk/
_PROJECT_ROOT = _PACKAGE_ROOT.parent

DEFAULT_API_BASE_URL = "http://localhost:5000/api"
DEFAULT_PLAYER_ORIGIN = "https://www.youtube.com"

_SETTINGS_LOCK = threading.Lock()
_SETTINGS_SINGLETON: Optional["Settings"] = None


@dataclass
class Settings:
    app_name: str
    env: str
    log_level: str
    api_base_url: str
    http_timeout: float
    task_workers: int
    player_origin: str
    poll_interval: float
    load_timeout: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "app_name": self.app_name,
            "env": self.env,
            "log_level": self.log_level,
            "api_base_url": self.api_base_url,
            "http_timeout": self.http_timeout,
            "task_workers": self.task_workers,
            "player_origin": self.player_origin,
            "poll_interval": self.poll_interval,
            "load_timeout": self.load_timeout,
        }


def _env_float(name: str, default: float, *, minimum: float = 0.0) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        log.warning("settings_invalid_number", extra={"setting": name, "value": raw})
        return default
    if not math.isfinite(value) or value <= minimum:
        log.warning("settings_out_of_range", extra={"setting": name, "value": raw})
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return max(1, int(raw))
    except ValueError:
        log.warning("settings_invalid_number", extra={"setting": name, "value": raw})
        return default


def _build_settings() -> Settings:
    load_dotenv(_PROJECT_ROOT / ".env")

    api_base_url = os.getenv("MEDIADESK_API_BASE_URL")
    if not api_base_url:
        log.warning("api_base_url_not_set", extra={"default": DEFAULT_API_BASE_URL})
        api_base_url = DEFAULT_API_BASE_URL
    if urlparse(api_base_url).scheme not in ("http", "https"):
        raise ConfigError(f"MEDIADESK_API_BASE_URL must be an http(s) URL, got {api_base_url!r}")

    load_timeout: Optional[float] = None
    if os.getenv("MEDIADESK_LOAD_TIMEOUT"):
        load_timeout = _env_float("MEDIADESK_LOAD_TIMEOUT", 0.0) or None

    return Settings(
        app_name=os.getenv("MEDIADESK_APP_NAME", "MediaDesk"),
        env=os.getenv("MEDIADESK_ENV", "development"),
        log_level=os.getenv("MEDIADESK_LOG_LEVEL", "INFO").upper(),
        api_base_url=api_base_url.rstrip("/"),
        http_timeout=_env_float("MEDIADESK_HTTP_TIMEOUT", 20.0),
        task_workers=_env_int("MEDIADESK_TASK_WORKERS", 4),
        player_origin=os.getenv("MEDIADESK_PLAYER_ORIGIN", DEFAULT_PLAYER_ORIGIN).rstrip("/"),
        poll_interval=_env_float("MEDIADESK_POLL_INTERVAL", 1.0),
        load_timeout=load_timeout,
    )


def get_settings(*, reload: bool = False) -> Settings:
    global _SETTINGS_SINGLETON
    with _SETTINGS_LOCK:
        if _SETTINGS_SINGLETON is None or reload:
            _SETTINGS_SINGLETON = _build_settings()

        return _SETTINGS_SINGLETON


__all__ = [
    "DEFAULT_API_BASE_URL",
    "DEFAULT_PLAYER_ORIGIN",
    "Settings",
    "get_settings",
]
