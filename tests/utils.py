"""Shared test utilities for ai-hedgehog tests."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from hedgehog.config.schema import WatchConfiguration
from hedgehog.watching.events import ChangeEvent


def make_config(root: str | Path = "/proj", **overrides: Any) -> WatchConfiguration:
    """Create a WatchConfiguration with short test-friendly timings.

    Defaults: extensions ``.js``, ignore ``node_modules``, 100ms debounce.
    """
    values: dict[str, Any] = {
        "root_directory": Path(root),
        "ignore_patterns": ("node_modules",),
        "watched_extensions": frozenset({".js"}),
        "debounce_window_ms": 100,
        "model_identifier": "fake/model",
        "system_prompt": "You are a reviewer.",
    }
    values.update(overrides)
    return WatchConfiguration(**values)


class RecordingSink:
    """OutputSink that records every call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def status(self, message: str) -> None:
        self.calls.append(("status", message))

    def success(self, message: str) -> None:
        self.calls.append(("success", message))

    def detail(self, message: str) -> None:
        self.calls.append(("detail", message))

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.calls.append(("error", message))

    def file_event(self, kind: str, path: str) -> None:
        self.calls.append(("file_event", (kind, path)))

    def preparing(self, relative_path: str) -> None:
        self.calls.append(("preparing", relative_path))

    def begin_feedback(self, relative_path: str) -> None:
        self.calls.append(("begin", relative_path))

    def write(self, chunk: str) -> None:
        self.calls.append(("write", chunk))

    def end_feedback(self, relative_path: str) -> None:
        self.calls.append(("end", relative_path))

    def of(self, kind: str) -> list[Any]:
        return [arg for name, arg in self.calls if name == kind]

    @property
    def writes(self) -> list[str]:
        return self.of("write")

    @property
    def errors(self) -> list[str]:
        return self.of("error")


class FakeModelClient:
    """ModelClient yielding canned chunks.

    Args:
        chunks: Text chunks to yield in order
        error: Exception to raise; when opening the stream unless
               ``fail_after`` is set
        fail_after: Raise ``error`` after this many chunks
        delay: Seconds to sleep before each chunk
    """

    def __init__(
        self,
        chunks: Sequence[str] = (),
        *,
        error: Exception | None = None,
        fail_after: int | None = None,
        delay: float = 0.0,
        model: str = "fake/model",
    ) -> None:
        self.chunks = list(chunks)
        self.error = error
        self.fail_after = fail_after
        self.delay = delay
        self._model = model
        self.calls: list[dict[str, Any]] = []

    @property
    def model(self) -> str:
        return self._model

    async def stream(self, prompt: str, *, system_prompt: str, max_tokens: int = 4096):
        self.calls.append(
            {"prompt": prompt, "system_prompt": system_prompt, "max_tokens": max_tokens}
        )
        if self.error is not None and self.fail_after is None:
            raise self.error
        for index, chunk in enumerate(self.chunks):
            if self.error is not None and index == self.fail_after:
                raise self.error
            if self.delay:
                await asyncio.sleep(self.delay)
            yield chunk


class RecordingDispatcher:
    """Dispatcher that records events and tracks overlap.

    Args:
        duration: Seconds each dispatch takes
    """

    def __init__(self, duration: float = 0.0) -> None:
        self.duration = duration
        self.events: list[ChangeEvent] = []
        self.active = 0
        self.max_active = 0

    @property
    def paths(self) -> list[str]:
        return [str(e.path) for e in self.events]

    async def run(self, event: ChangeEvent) -> None:
        self.events.append(event)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.duration:
                await asyncio.sleep(self.duration)
        finally:
            self.active -= 1


async def wait_until(predicate: Callable[[], bool], timeout: float = 3.0) -> None:
    """Poll ``predicate`` until true.

    Raises:
        asyncio.TimeoutError: If it stays false for ``timeout`` seconds
    """
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise asyncio.TimeoutError("condition not met")
        await asyncio.sleep(0.01)


def create_mock_llm_stream_chunk(text: str | None = "chunk", is_final: bool = False) -> Any:
    """Create a mock streaming chunk shaped like litellm's."""
    from unittest.mock import Mock

    chunk = Mock()
    chunk.choices = [Mock()]
    chunk.choices[0].delta = Mock()
    chunk.choices[0].delta.content = text
    chunk.choices[0].finish_reason = "stop" if is_final else None

    return chunk


async def aiter_of(items: Sequence[Any]):
    """Async iterator over ``items``."""
    for item in items:
        yield item
