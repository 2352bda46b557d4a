"""Configuration file loading and resolution.

Handles:
- YAML file parsing
- Deep merging of user and project files
- Environment variable overrides
- Resolution into a frozen WatchConfiguration (CLI flags win)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from hedgehog.config.paths import get_config_paths
from hedgehog.config.schema import (
    DEBOUNCE_WINDOW_MS,
    DEFAULT_EXTENSIONS,
    DEFAULT_IGNORE_PATTERNS,
    DEFAULT_MODEL,
    DEFAULT_SYSTEM_PROMPT,
    POLL_INTERVAL_MS,
    STABILITY_THRESHOLD_MS,
    Config,
    DebouncePolicy,
    LLMConfig,
    LoggingConfig,
    WatchConfig,
    WatchConfiguration,
)
from hedgehog.errors import ConfigurationError

_log = logging.getLogger("hedgehog.config")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``.

    Nested dicts merge recursively, lists are replaced whole, and None in
    ``override`` leaves the base value alone.
    """
    result = base.copy()
    for key, value in override.items():
        if value is None:
            continue
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value
    return result


def env_overrides() -> dict[str, Any]:
    """Build a config dict from HEDGEHOG_* environment variables."""
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("HEDGEHOG_LOG")
    if log_path:
        overrides.setdefault("logging", {})["file"] = log_path

    log_level = os.environ.get("HEDGEHOG_LOG_LEVEL")
    if log_level:
        overrides.setdefault("logging", {})["level"] = log_level

    model = os.environ.get("HEDGEHOG_MODEL")
    if model:
        overrides.setdefault("llm", {})["model"] = model

    return overrides


def _str_list(value: Any) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return split_csv(value)
    return [str(v) for v in value if v is not None and str(v)]


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert a merged dict to the typed Config dataclass."""
    watch_data = data.get("watch") or {}
    watch = WatchConfig(
        ignore=_str_list(watch_data.get("ignore")),
        extensions=_str_list(watch_data.get("extensions")),
        debounce_policy=watch_data.get("debounce_policy"),
        serialize_dispatches=watch_data.get("serialize_dispatches"),
        stability_threshold_ms=watch_data.get("stability_threshold_ms"),
        poll_interval_ms=watch_data.get("poll_interval_ms"),
    )

    llm_data = data.get("llm") or {}
    llm = LLMConfig(
        model=llm_data.get("model"),
        system_prompt=llm_data.get("system_prompt"),
        api_base=llm_data.get("api_base"),
    )

    log_data = data.get("logging") or {}
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        file=log_data.get("file"),
    )

    return Config(watch=watch, llm=llm, logging=logging_config)


def load_config(
    root_directory: str | Path | None = None,
    config_file: Path | None = None,
) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Environment variables
    2. Explicit ``--config`` file
    3. Project config (<root>/.hedgehog/config.yaml)
    4. User config
    """
    merged: dict[str, Any] = {}

    paths = get_config_paths(root_directory)
    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        paths.append(config_file)

    for path in paths:
        data = load_yaml_file(path)
        if data:
            _log.debug("Loaded config from %s", path)
            merged = deep_merge(merged, data)

    merged = deep_merge(merged, env_overrides())
    return dict_to_config(merged)


def split_csv(value: str) -> list[str]:
    """Split a comma-separated option, dropping blanks."""
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_debounce_policy(value: str | DebouncePolicy | None) -> DebouncePolicy:
    """Parse a debounce policy name, defaulting to GLOBAL."""
    if value is None:
        return DebouncePolicy.GLOBAL
    if isinstance(value, DebouncePolicy):
        return value
    try:
        return DebouncePolicy(value.strip().lower())
    except ValueError:
        choices = ", ".join(p.value for p in DebouncePolicy)
        raise ConfigurationError(
            f"Unknown debounce policy '{value}' (expected one of: {choices})"
        ) from None


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def build_watch_configuration(
    root_directory: str | Path,
    config: Config | None = None,
    *,
    ignore: Iterable[str] | None = None,
    extensions: Iterable[str] | None = None,
    model: str | None = None,
    system_prompt: str | None = None,
    debounce_policy: str | None = None,
    serialize_dispatches: bool | None = None,
    verbose: bool = False,
) -> WatchConfiguration:
    """Resolve CLI values over file config over defaults.

    Raises:
        ConfigurationError: If the root is not a directory or a setting is invalid.
    """
    config = config or Config()

    root = Path(root_directory).expanduser().resolve()
    if not root.is_dir():
        raise ConfigurationError(f"Directory not found: {root}")

    ignore_patterns = _first(
        list(ignore) if ignore is not None else None,
        config.watch.ignore,
        list(DEFAULT_IGNORE_PATTERNS),
    )
    watched = _first(
        list(extensions) if extensions is not None else None,
        config.watch.extensions,
        list(DEFAULT_EXTENSIONS),
    )
    if not watched:
        raise ConfigurationError("At least one file extension must be watched")

    return WatchConfiguration(
        root_directory=root,
        ignore_patterns=tuple(ignore_patterns),
        watched_extensions=frozenset(watched),
        debounce_window_ms=DEBOUNCE_WINDOW_MS,
        model_identifier=_first(model, config.llm.model, DEFAULT_MODEL),
        system_prompt=_first(system_prompt, config.llm.system_prompt, DEFAULT_SYSTEM_PROMPT),
        debounce_policy=parse_debounce_policy(
            _first(debounce_policy, config.watch.debounce_policy)
        ),
        serialize_dispatches=bool(
            _first(serialize_dispatches, config.watch.serialize_dispatches, False)
        ),
        stability_threshold_ms=int(
            _first(config.watch.stability_threshold_ms, STABILITY_THRESHOLD_MS)
        ),
        poll_interval_ms=int(_first(config.watch.poll_interval_ms, POLL_INTERVAL_MS)),
        api_base=config.llm.api_base,
        verbose=verbose,
    )
