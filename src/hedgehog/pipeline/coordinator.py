"""Turns the raw watch event stream into debounced dispatches.

Debouncing works on timer slots. Under the GLOBAL policy there is a single
slot for the whole tree, so an event for file B replaces a still-pending
dispatch for file A. Under PER_PATH each path owns its slot. Replacing a
slot cancels the old timer and installs the new one in one synchronous
step; nothing else runs on the event loop in between.

Dispatches that fire run as independent tasks. By default they may overlap
when a model call outlives the next debounce window, in which case their
console output can interleave. With ``serialize_dispatches`` they queue on
a lock and run one at a time in firing order.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from hedgehog.config.schema import DebouncePolicy, WatchConfiguration
from hedgehog.errors import WatchError
from hedgehog.logging import TRACE, get_logger
from hedgehog.output import OutputSink
from hedgehog.watching.events import ChangeEvent, WatchEvent, WatchEventKind
from hedgehog.watching.filter import PathFilter

log = get_logger("coordinator")


class Dispatcher(Protocol):
    """Anything that can process a surviving change (the FeedbackPipeline)."""

    async def run(self, event: ChangeEvent) -> None: ...


@dataclass
class PendingDispatch:
    """A scheduled dispatch waiting for its debounce timer."""

    event: ChangeEvent
    handle: asyncio.TimerHandle

    def cancel(self) -> None:
        self.handle.cancel()


class ChangeCoordinator:
    """Filters, debounces and dispatches file changes."""

    def __init__(
        self,
        config: WatchConfiguration,
        path_filter: PathFilter,
        dispatcher: Dispatcher,
        sink: OutputSink,
    ) -> None:
        self._config = config
        self._filter = path_filter
        self._dispatcher = dispatcher
        self._sink = sink

        # None keys the single global slot; paths key per-path slots.
        self._slots: dict[Path | None, PendingDispatch] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._lock = asyncio.Lock() if config.serialize_dispatches else None

        self._ready = False
        self._fired = 0

    @property
    def is_ready(self) -> bool:
        """True once the watcher has finished its initial scan."""
        return self._ready

    @property
    def pending(self) -> list[ChangeEvent]:
        """Events currently waiting on a debounce timer."""
        return [slot.event for slot in self._slots.values()]

    @property
    def in_flight(self) -> int:
        """Number of dispatch tasks not yet finished."""
        return len(self._tasks)

    @property
    def fired(self) -> int:
        """Number of dispatches started so far."""
        return self._fired

    def handle(self, event: WatchEvent) -> None:
        """Process one raw watch event. Must run on the event loop."""
        kind = event.kind

        if kind is WatchEventKind.READY:
            self._ready = True
            self._sink.success("✅ AI-Hedgehog is ready! Save a file to get feedback.")
            return

        if kind is WatchEventKind.ERROR:
            error = event.error or WatchError("unknown watcher error")
            log.warning("Watcher error: %s", error)
            self._sink.error(f"Watcher error: {error}", error)
            return

        change = event.as_change()
        if change is None:
            return

        if kind is WatchEventKind.ADDED and not self._ready:
            log.log(TRACE, "Ignoring initial scan entry %s", change.path)
            return

        if not self._filter.qualifies(change.path):
            log.debug("Skipping %s", change.path)
            self._sink.detail(f"Skipping {change.path} (not a watched file)")
            return

        self._schedule(change)

    async def run(self, source: AsyncIterable[WatchEvent]) -> None:
        """Consume ``source`` until it is exhausted or the task is cancelled."""
        async for event in source:
            self.handle(event)

    def _schedule(self, change: ChangeEvent) -> None:
        key = None if self._config.debounce_policy is DebouncePolicy.GLOBAL else change.path
        loop = asyncio.get_running_loop()

        previous = self._slots.pop(key, None)
        if previous is not None:
            previous.cancel()
            log.debug("Superseded pending dispatch for %s", previous.event.path)

        handle = loop.call_later(self._config.debounce_window, self._fire, key)
        self._slots[key] = PendingDispatch(change, handle)

    def _fire(self, key: Path | None) -> None:
        pending = self._slots.pop(key, None)
        if pending is None:
            return

        self._fired += 1
        task = asyncio.get_running_loop().create_task(self._dispatch(pending.event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _dispatch(self, change: ChangeEvent) -> None:
        try:
            if self._lock is None:
                await self._dispatcher.run(change)
            else:
                async with self._lock:
                    await self._dispatcher.run(change)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # FeedbackPipeline.run never raises; other dispatchers might.
            log.exception("Unhandled error dispatching %s", change.path)
            self._sink.error(f"Error processing {change.path}: {e}", e)

    async def drain(self) -> None:
        """Wait until every started dispatch has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Cancel all pending timers. In-flight dispatches are left alone."""
        for slot in self._slots.values():
            slot.cancel()
        self._slots.clear()
