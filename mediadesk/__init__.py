"""MediaDesk: media catalog querying and embedded player synchronization."""

__version__ = "0.1.0"
