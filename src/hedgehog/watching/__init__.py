"""File watching for ai-hedgehog.

Provides the path filter that decides which files qualify for feedback and
a polling-based tree watcher that reports added and changed files once
their writes have settled.
"""

from hedgehog.watching.events import (
    ChangeEvent,
    ChangeKind,
    WatchEvent,
    WatchEventKind,
)
from hedgehog.watching.filter import PathFilter, compile_patterns
from hedgehog.watching.watcher import TreeWatcher

__all__ = [
    "ChangeEvent",
    "ChangeKind",
    "PathFilter",
    "TreeWatcher",
    "WatchEvent",
    "WatchEventKind",
    "compile_patterns",
]
