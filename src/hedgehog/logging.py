"""Logging configuration for ai-hedgehog.

The console belongs to the feedback stream, so diagnostics go elsewhere:
- A log file from ``logging.file`` in config or the HEDGEHOG_LOG variable
- Stderr, but only when it is an interactive terminal
- Levels: TRACE(5), DEBUG, VERBOSE(15), INFO, WARNING, ERROR
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hedgehog.config.schema import LoggingConfig

TRACE = 5
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

logger = logging.getLogger("hedgehog")

_configured = False

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


class _LowercaseLevelFormatter(logging.Formatter):
    """Formatter that emits lowercase level names."""

    def format(self, record: logging.LogRecord) -> str:
        record.levelname = record.levelname.lower()
        return super().format(record)


def resolve_level(name: str | None, default: int = logging.WARNING) -> int:
    """Map a level name such as "debug" or "trace" to its number."""
    if not name:
        return default
    key = name.strip().upper()
    if key == "WARN":
        key = "WARNING"
    level = logging.getLevelName(key)
    return level if isinstance(level, int) else default


def _log_file_handler(path: str) -> logging.Handler | None:
    try:
        return logging.FileHandler(os.path.expanduser(path), mode="a", encoding="utf-8")
    except OSError as e:
        if sys.stderr.isatty():
            print(f"[hedgehog] Failed to open log file {path}: {e}", file=sys.stderr)
        return None


def setup_logging(config: LoggingConfig | None = None, *, verbose: bool = False) -> None:
    """Configure the ``hedgehog`` logger once; later calls do nothing.

    Args:
        config: Level and file settings from the config files.
        verbose: The ``--verbose`` flag. Lowers the level to VERBOSE.
    """
    global _configured
    if _configured:
        return
    _configured = True

    level = resolve_level(config.level if config else None)
    if verbose:
        level = min(level, VERBOSE)
    logger.setLevel(level)

    log_path = (config.file if config else None) or os.environ.get("HEDGEHOG_LOG")

    handler: logging.Handler | None = None
    if log_path:
        handler = _log_file_handler(log_path)
    if handler is None and sys.stderr.isatty():
        handler = logging.StreamHandler(sys.stderr)
    if handler is None:
        return

    handler.setLevel(level)
    handler.setFormatter(_LowercaseLevelFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the ``hedgehog`` logger or one of its children.

    Args:
        name: Child name such as "watching" or "pipeline".
    """
    return logger.getChild(name) if name else logger
