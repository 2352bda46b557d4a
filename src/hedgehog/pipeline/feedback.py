"""One model invocation per surviving file change.

A dispatch reads the file, renders the prompt, opens the model stream and
copies every chunk to the output sink as it arrives. Every failure stops at
this boundary: it is reported once and the dispatch ends, leaving any
partial output on screen.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from hedgehog.config.schema import WatchConfiguration
from hedgehog.core.llm.provider import ModelClient
from hedgehog.core.prompts import FeedbackRequest
from hedgehog.errors import InvocationError, ReadError
from hedgehog.logging import get_logger
from hedgehog.output import OutputSink
from hedgehog.watching.events import ChangeEvent

log = get_logger("pipeline")


class DispatchState(Enum):
    """Lifecycle of a single dispatch. States only move forward."""

    IDLE = 0
    READING = 1
    PROMPTING = 2
    STREAMING = 3
    COMPLETED = 4
    FAILED = 5

    @property
    def is_terminal(self) -> bool:
        return self in (DispatchState.COMPLETED, DispatchState.FAILED)


@dataclass
class Dispatch:
    """Record of one dispatch, returned for inspection."""

    event: ChangeEvent
    state: DispatchState = DispatchState.IDLE
    request: FeedbackRequest | None = None
    chunks: int = 0
    error: Exception | None = None
    history: list[DispatchState] = field(default_factory=lambda: [DispatchState.IDLE])

    def advance(self, state: DispatchState) -> None:
        if self.state.is_terminal or state.value <= self.state.value:
            raise RuntimeError(f"Invalid dispatch transition {self.state.name} -> {state.name}")
        self.state = state
        self.history.append(state)


def relative_display_path(path: Path, root: Path) -> str:
    """Path relative to the watched root, with forward slashes."""
    try:
        relative = path.relative_to(root)
    except ValueError:
        relative = Path(os.path.relpath(path, root))
    return relative.as_posix()


class FeedbackPipeline:
    """Turns a ChangeEvent into streamed model feedback."""

    def __init__(
        self,
        config: WatchConfiguration,
        client: ModelClient,
        sink: OutputSink,
    ) -> None:
        self._config = config
        self._client = client
        self._sink = sink

    async def run(self, event: ChangeEvent) -> None:
        """Process one event. Never raises except on cancellation."""
        await self.dispatch(event)

    async def dispatch(self, event: ChangeEvent) -> Dispatch:
        record = Dispatch(event=event)
        self._sink.file_event(event.kind.value, str(event.path))

        record.advance(DispatchState.READING)
        try:
            content = await self._read(event.path)
        except ReadError as e:
            log.warning("%s", e)
            record.error = e
            record.advance(DispatchState.FAILED)
            self._sink.error(str(e), e)
            return record

        record.advance(DispatchState.PROMPTING)
        relative = relative_display_path(event.path, self._config.root_directory)
        self._sink.preparing(relative)
        request = FeedbackRequest.build(relative, os.path.splitext(event.path.name)[1], content)
        record.request = request

        record.advance(DispatchState.STREAMING)
        self._sink.detail(
            f"Sending request for {event.path} using model {self._client.model}..."
        )
        try:
            self._sink.begin_feedback(relative)
            stream = self._client.stream(
                request.rendered_prompt,
                system_prompt=self._config.system_prompt,
                max_tokens=self._config.max_tokens,
            )
            async for text in stream:
                if not text:
                    continue
                self._sink.write(text)
                record.chunks += 1
        except asyncio.CancelledError:
            raise
        except Exception as e:
            error = InvocationError(f"Error getting AI feedback for {relative}: {e}")
            log.error("Model invocation failed for %s: %s", relative, e)
            record.error = error
            record.advance(DispatchState.FAILED)
            self._sink.error(str(error), e)
            return record

        record.advance(DispatchState.COMPLETED)
        self._sink.end_feedback(relative)
        log.debug("Dispatch for %s completed (%d chunks)", relative, record.chunks)
        return record

    async def _read(self, path: Path) -> str:
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            raise ReadError(path, "file no longer exists") from None
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(path, str(e)) from e
