"""Error taxonomy for ai-hedgehog.

Only ConfigurationError is allowed to end the process. The others are
reported through the output sink and the watch loop carries on.
"""

from __future__ import annotations

from pathlib import Path


class HedgehogError(Exception):
    """Base class for all ai-hedgehog errors."""


class ConfigurationError(HedgehogError):
    """Missing credential, malformed ignore pattern or unusable directory."""


class WatchError(HedgehogError):
    """The filesystem watcher could not observe part of the tree."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ReadError(HedgehogError):
    """A file vanished or became unreadable between event and dispatch."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class InvocationError(HedgehogError):
    """The model call was rejected or its stream broke mid-transfer."""
