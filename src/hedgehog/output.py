"""Console output for status lines, errors and streamed feedback."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.panel import Panel
from rich.status import Status
from rich.text import Text


@runtime_checkable
class OutputSink(Protocol):
    """Append-only destination for everything the user sees."""

    def status(self, message: str) -> None:
        """A normal status line."""
        ...

    def success(self, message: str) -> None:
        """A status line announcing that something is ready or done."""
        ...

    def detail(self, message: str) -> None:
        """A verbose-only diagnostic line."""
        ...

    def error(self, message: str, exc: BaseException | None = None) -> None:
        """An error line, visually distinct from feedback."""
        ...

    def file_event(self, kind: str, path: str) -> None:
        """Announce that a file change is being processed."""
        ...

    def preparing(self, relative_path: str) -> None:
        """Show progress while the model request is being prepared."""
        ...

    def begin_feedback(self, relative_path: str) -> None:
        """Open the feedback block for one file."""
        ...

    def write(self, chunk: str) -> None:
        """Append one streamed chunk verbatim."""
        ...

    def end_feedback(self, relative_path: str) -> None:
        """Closing marker after a completed stream."""
        ...


class ConsoleSink:
    """OutputSink rendered on a rich Console.

    Streamed chunks bypass rich rendering and go straight to the console's
    file, so markup, emoji codes and control characters in model output are
    left untouched.
    """

    def __init__(self, console: Console | None = None, *, verbose: bool = False) -> None:
        self._console = console or Console(highlight=False)
        self._verbose = verbose
        self._spinner: Status | None = None

    @property
    def console(self) -> Console:
        return self._console

    @property
    def spinning(self) -> bool:
        return self._spinner is not None

    def status(self, message: str) -> None:
        self._console.print(Text(message, style="blue"))

    def success(self, message: str) -> None:
        self._console.print(Text(message, style="green"))

    def notice(self, message: str) -> None:
        self._console.print(Text(message, style="yellow"))

    def detail(self, message: str) -> None:
        if self._verbose:
            self._console.print(Text(message, style="bright_black"))

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self._stop_spinner()
        text = Text("Error: ", style="bold red")
        text.append(message, style="red")
        if exc is not None and str(exc) and str(exc) not in message:
            text.append(f" ({exc})", style="red")
        self._console.print(text)

    def file_event(self, kind: str, path: str) -> None:
        self._console.print(Text(f"\n📝 File {kind}: {path}", style="yellow"))

    def preparing(self, relative_path: str) -> None:
        # rich allows one live display per console; overlapping dispatches share it.
        if self._spinner is not None:
            return
        self._spinner = self._console.status(
            Text("Preparing AI feedback...", style="cyan"), spinner="dots"
        )
        self._spinner.start()

    def begin_feedback(self, relative_path: str) -> None:
        self._stop_spinner()
        name = relative_path.rsplit("/", 1)[-1]
        self._console.print(
            Panel(
                Text("AI Feedback (streaming)...", style="cyan"),
                title=f"AI Feedback for {name}",
                title_align="center",
                border_style="cyan",
                padding=1,
                expand=False,
            )
        )

    def write(self, chunk: str) -> None:
        self._stop_spinner()
        self._console.file.write(chunk)
        self._console.file.flush()

    def end_feedback(self, relative_path: str) -> None:
        self._console.print("\n")
        self.detail(f"Completed AI feedback for {relative_path}")

    def _stop_spinner(self) -> None:
        if self._spinner is not None:
            self._spinner.stop()
            self._spinner = None
