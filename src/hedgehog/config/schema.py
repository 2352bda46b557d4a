"""Configuration schema dataclasses for ai-hedgehog.

``Config`` mirrors the YAML files: every field is optional so partial files
merge together. ``WatchConfiguration`` is the frozen, fully resolved view the
pipeline runs against once startup is over.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

DEFAULT_IGNORE_PATTERNS = ("node_modules", "dist", ".git", "build", ".next")

DEFAULT_EXTENSIONS = (
    ".js", ".jsx", ".ts", ".tsx", ".py", ".html", ".css",
    ".go", ".rs", ".java", ".c", ".cpp", ".php", ".rb",
)

DEFAULT_MODEL = "replicate/anthropic/claude-3.7-sonnet"

DEFAULT_SYSTEM_PROMPT = (
    "You are an expert senior polyglot software developer, architect and "
    "engineer providing feedback suggestions etc."
)

# Not exposed as a CLI flag.
DEBOUNCE_WINDOW_MS = 500

# Write-settle policy for the watcher.
STABILITY_THRESHOLD_MS = 2000
POLL_INTERVAL_MS = 100

# Fixed model output budget, independent of input size.
MAX_OUTPUT_TOKENS = 4096


class DebouncePolicy(Enum):
    """How pending dispatches are keyed.

    - GLOBAL: one pending timer for the whole tree; an event for file B
      cancels a still-pending dispatch for file A.
    - PER_PATH: one pending timer per path; edits to different files each
      get their own dispatch.
    """

    GLOBAL = "global"
    PER_PATH = "per-path"


@dataclass
class WatchConfig:
    """Watch settings as read from config files.

    Example config.yaml:
        watch:
          ignore: ["node_modules", "dist", "\\\\.min\\\\."]
          extensions: [".py", ".ts"]
          debounce_policy: per-path
          serialize_dispatches: true
    """

    ignore: list[str] | None = None
    extensions: list[str] | None = None
    debounce_policy: str | None = None  # "global" or "per-path"
    serialize_dispatches: bool | None = None
    stability_threshold_ms: int | None = None
    poll_interval_ms: int | None = None


@dataclass
class LLMConfig:
    """Model settings."""

    model: str | None = None
    system_prompt: str | None = None
    api_base: str | None = None  # Custom endpoint


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration object."""

    watch: WatchConfig = field(default_factory=WatchConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


@dataclass(frozen=True)
class WatchConfiguration:
    """Resolved settings for one watch session. Never mutated."""

    root_directory: Path
    ignore_patterns: tuple[str, ...] = DEFAULT_IGNORE_PATTERNS
    watched_extensions: frozenset[str] = frozenset(DEFAULT_EXTENSIONS)
    debounce_window_ms: int = DEBOUNCE_WINDOW_MS
    model_identifier: str = DEFAULT_MODEL
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    debounce_policy: DebouncePolicy = DebouncePolicy.GLOBAL
    serialize_dispatches: bool = False
    stability_threshold_ms: int = STABILITY_THRESHOLD_MS
    poll_interval_ms: int = POLL_INTERVAL_MS
    max_tokens: int = MAX_OUTPUT_TOKENS
    api_base: str | None = None
    verbose: bool = False

    @property
    def debounce_window(self) -> float:
        """Debounce window in seconds."""
        return self.debounce_window_ms / 1000.0
