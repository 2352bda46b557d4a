"""Path qualification for watched files."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from pathlib import Path

from hedgehog.errors import ConfigurationError


def compile_patterns(patterns: Iterable[str]) -> tuple[re.Pattern[str], ...]:
    """Compile ignore patterns once.

    Each pattern is a regular expression searched anywhere in the full
    path, so a plain word behaves as a substring match.

    Raises:
        ConfigurationError: If any pattern is not a valid regular expression.
    """
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ConfigurationError(f"Invalid ignore pattern '{pattern}': {e}") from e
    return tuple(compiled)


class PathFilter:
    """Decides whether a path is eligible for feedback.

    A path qualifies when its base name is not a dotfile, no ignore pattern
    matches the full path, and its extension (with the leading dot,
    case-sensitive) is one of the watched extensions.
    """

    def __init__(self, ignore_patterns: Iterable[str], watched_extensions: Iterable[str]) -> None:
        self._patterns = compile_patterns(ignore_patterns)
        self._extensions = frozenset(watched_extensions)

    @classmethod
    def from_config(cls, config) -> PathFilter:
        """Build a filter from a WatchConfiguration."""
        return cls(config.ignore_patterns, config.watched_extensions)

    @property
    def extensions(self) -> frozenset[str]:
        return self._extensions

    def matches_ignore(self, path: str | Path) -> bool:
        """True if any ignore pattern matches the full path."""
        text = os.fspath(path)
        return any(p.search(text) for p in self._patterns)

    def qualifies(self, path: str | Path) -> bool:
        text = os.fspath(path)
        if os.path.basename(text).startswith("."):
            return False
        if self.matches_ignore(text):
            return False
        return os.path.splitext(text)[1] in self._extensions

    def ignores(self, path: str | Path, root: str | Path | None = None) -> bool:
        """Watcher-side predicate: skip dot entries and ignore-pattern matches.

        Applies to directories as well as files, so ignored subtrees are
        never scanned. Dot components above ``root`` are not considered.
        """
        p = Path(path)
        if root is None:
            parts: tuple[str, ...] = (p.name,)
        else:
            try:
                parts = p.relative_to(root).parts
            except ValueError:
                parts = (p.name,)
        if any(part.startswith(".") for part in parts):
            return True
        return self.matches_ignore(p)
