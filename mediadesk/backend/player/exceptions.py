from __future__ import annotations

"""Exceptions for the player subsystem."""

from mediadesk.backend.common.errors import MediaDeskError


class PlayerError(MediaDeskError):
    """Top-level error raised by the player subsystem."""
