"""Event types flowing from the watcher to the coordinator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ChangeKind(Enum):
    """Kinds of file change that can lead to a dispatch."""

    ADDED = "added"
    CHANGED = "changed"


class WatchEventKind(Enum):
    """Everything the TreeWatcher can emit."""

    ADDED = "added"
    CHANGED = "changed"
    ERROR = "error"
    READY = "ready"


@dataclass(frozen=True)
class ChangeEvent:
    """A file change that may become a dispatch."""

    path: Path
    kind: ChangeKind


@dataclass(frozen=True)
class WatchEvent:
    """A raw event from the watcher.

    ``path`` is set for added/changed events, ``error`` for error events.
    """

    kind: WatchEventKind
    path: Path | None = None
    error: BaseException | None = None

    @classmethod
    def added(cls, path: Path) -> WatchEvent:
        return cls(WatchEventKind.ADDED, path=path)

    @classmethod
    def changed(cls, path: Path) -> WatchEvent:
        return cls(WatchEventKind.CHANGED, path=path)

    @classmethod
    def ready(cls) -> WatchEvent:
        return cls(WatchEventKind.READY)

    @classmethod
    def failed(cls, error: BaseException) -> WatchEvent:
        return cls(WatchEventKind.ERROR, error=error)

    def as_change(self) -> ChangeEvent | None:
        """Convert an added/changed event into a ChangeEvent."""
        if self.path is None:
            return None
        if self.kind is WatchEventKind.ADDED:
            return ChangeEvent(self.path, ChangeKind.ADDED)
        if self.kind is WatchEventKind.CHANGED:
            return ChangeEvent(self.path, ChangeKind.CHANGED)
        return None
