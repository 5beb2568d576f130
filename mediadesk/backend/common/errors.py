from __future__ import annotations



class MediaDeskError(Exception):
    """Base for all MediaDesk exceptions."""


class ConfigError(MediaDeskError):
    """Configuration related issues."""


class TaskError(MediaDeskError):
    """Task scheduling/execution issues."""


class NetworkError(MediaDeskError):
    """Network/HTTP layer issues."""


class ContentUnavailable(MediaDeskError):
    """The content API could not serve a request (any cause)."""
