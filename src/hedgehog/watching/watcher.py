"""Directory tree watching using polling.

Polling is preferred over native file watchers for cross-platform
reliability. A changed file is only reported once it has stopped changing
for the stability threshold, so a file that is still being written does not
produce a premature event.
"""

from __future__ import annotations

import asyncio
import os
import time
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from pathlib import Path

from hedgehog.errors import WatchError
from hedgehog.logging import get_logger
from hedgehog.watching.events import WatchEvent, WatchEventKind

log = get_logger("watching")

# (mtime, size)
Stamp = tuple[float, int]


@dataclass
class _Settling:
    """A file whose latest write has not settled yet."""

    kind: WatchEventKind
    stamp: Stamp
    last_change: float


class TreeWatcher:
    """Watches every file under a root directory.

    The first scan reports each existing file as ``added`` and then emits a
    single ``ready`` event. Afterwards each poll compares the tree with the
    last known state and reports new files as ``added`` and modified files
    as ``changed`` once they have been stable for ``stability_threshold``
    seconds. Deleted files are forgotten silently. Scan failures are
    reported as ``error`` events once per failing path; files below an
    unreadable directory are not treated as deleted.

    Example:
        watcher = TreeWatcher(Path("/project"), ignore=path_filter.ignores)

        async for event in watcher.events():
            print(event.kind, event.path)
    """

    def __init__(
        self,
        root: Path,
        *,
        ignore: Callable[[Path, Path], bool] | None = None,
        poll_interval: float = 0.1,
        stability_threshold: float = 2.0,
    ) -> None:
        """Initialize the tree watcher.

        Args:
            root: Directory to watch recursively
            ignore: Predicate ``(path, root) -> bool``; matching files and
                    directories are skipped before any event is produced
            poll_interval: Seconds between polling cycles
            stability_threshold: Seconds a file must stay unchanged before
                    its change is reported
        """
        self._root = root
        self._ignore = ignore
        self._poll_interval = max(0.01, poll_interval)
        self._stability_threshold = max(0.0, stability_threshold)

        self._known: dict[Path, Stamp] = {}
        self._settling: dict[Path, _Settling] = {}
        self._failing: set[Path] = set()

        self._ready = False
        self._running = False

    @property
    def root(self) -> Path:
        return self._root

    @property
    def is_ready(self) -> bool:
        """True once the initial scan has completed."""
        return self._ready

    @property
    def watched_count(self) -> int:
        return len(self._known)

    def _skip(self, path: Path) -> bool:
        return self._ignore is not None and self._ignore(path, self._root)

    @property
    def failing(self) -> frozenset[Path]:
        """Directories and files the last scan could not read."""
        return frozenset(self._failing)

    def _unreadable(self, path: Path) -> bool:
        # Files under a directory that failed to scan keep their last known state.
        return any(path == p or p in path.parents for p in self._failing)

    def scan(self) -> tuple[dict[Path, Stamp], list[WatchEvent]]:
        """Walk the tree once.

        Returns:
            Mapping of file path to (mtime, size), and error events for
            directories or files that could not be read.
        """
        found: dict[Path, Stamp] = {}
        errors: list[WatchEvent] = []
        failing: set[Path] = set()
        stack = [self._root]

        while stack:
            directory = stack.pop()
            try:
                entries = list(os.scandir(directory))
            except FileNotFoundError:
                continue
            except OSError as e:
                failing.add(directory)
                if directory not in self._failing:
                    errors.append(
                        WatchEvent.failed(WatchError(f"Cannot scan {directory}: {e}", directory))
                    )
                continue

            for entry in entries:
                path = Path(entry.path)
                if self._skip(path):
                    continue
                try:
                    if entry.is_dir(follow_symlinks=False):
                        stack.append(path)
                    elif entry.is_file():
                        st = entry.stat()
                        found[path] = (st.st_mtime, st.st_size)
                except FileNotFoundError:
                    continue
                except OSError as e:
                    failing.add(path)
                    if path not in self._failing:
                        errors.append(
                            WatchEvent.failed(WatchError(f"Cannot stat {path}: {e}", path))
                        )

        self._failing = failing
        return found, errors

    def initial_scan(self) -> list[WatchEvent]:
        """Record the current tree and report it, ending with ``ready``."""
        found, errors = self.scan()
        self._known = found
        self._settling.clear()
        self._ready = True
        log.info("Initial scan of %s: %d files", self._root, len(found))
        events = errors + [WatchEvent.added(path) for path in sorted(found)]
        events.append(WatchEvent.ready())
        return events

    def check_changes(self, now: float | None = None) -> list[WatchEvent]:
        """Poll the tree and return events for files that have settled.

        Args:
            now: Monotonic timestamp to evaluate stability against
                 (defaults to ``time.monotonic()``)
        """
        if now is None:
            now = time.monotonic()

        found, events = self.scan()

        for path in list(self._known):
            if path not in found and not self._unreadable(path):
                del self._known[path]
                self._settling.pop(path, None)
                log.debug("Removed %s", path)

        for path in list(self._settling):
            if path not in found and not self._unreadable(path):
                del self._settling[path]

        for path, stamp in found.items():
            settling = self._settling.get(path)
            if settling is not None:
                if stamp != settling.stamp:
                    settling.stamp = stamp
                    settling.last_change = now
                continue

            known = self._known.get(path)
            if known is None:
                self._settling[path] = _Settling(WatchEventKind.ADDED, stamp, now)
            elif known != stamp:
                self._settling[path] = _Settling(WatchEventKind.CHANGED, stamp, now)

        for path, settling in list(self._settling.items()):
            if now - settling.last_change < self._stability_threshold:
                continue
            del self._settling[path]
            self._known[path] = settling.stamp
            events.append(WatchEvent(settling.kind, path=path))

        return events

    async def events(self) -> AsyncIterator[WatchEvent]:
        """Yield watch events until ``stop()`` is called.

        Scans run in a worker thread so the event loop keeps servicing
        debounce timers and model streams.
        """
        if self._running:
            raise RuntimeError("TreeWatcher already running")

        self._running = True
        log.info(
            "TreeWatcher started (interval: %.2fs, stability: %.2fs)",
            self._poll_interval,
            self._stability_threshold,
        )
        try:
            for event in await asyncio.to_thread(self.initial_scan):
                yield event

            while self._running:
                await asyncio.sleep(self._poll_interval)
                if not self._running:
                    break
                for event in await asyncio.to_thread(self.check_changes):
                    yield event
        finally:
            self._running = False
            log.info("TreeWatcher stopped")

    def stop(self) -> None:
        """Stop the polling loop after the current cycle."""
        self._running = False

    def is_running(self) -> bool:
        return self._running
