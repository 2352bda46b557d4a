"""Configuration management for ai-hedgehog.

Settings are layered lowest to highest:
- User-level config (~/.config/hedgehog/ or %APPDATA%)
- Project-level config (<watched root>/.hedgehog/config.yaml)
- Environment variable overrides (HEDGEHOG_*)
- Command-line flags

Example usage:
    from hedgehog.config import load_config, build_watch_configuration

    config = load_config(root_directory="/path/to/project")
    watch = build_watch_configuration("/path/to/project", config)
"""

from hedgehog.config.loader import (
    build_watch_configuration,
    deep_merge,
    load_config,
    parse_debounce_policy,
    split_csv,
)
from hedgehog.config.paths import (
    get_config_paths,
    get_project_config_path,
    get_user_config_path,
)
from hedgehog.config.schema import (
    DEBOUNCE_WINDOW_MS,
    DEFAULT_EXTENSIONS,
    DEFAULT_IGNORE_PATTERNS,
    DEFAULT_MODEL,
    DEFAULT_SYSTEM_PROMPT,
    MAX_OUTPUT_TOKENS,
    Config,
    DebouncePolicy,
    LLMConfig,
    LoggingConfig,
    WatchConfig,
    WatchConfiguration,
)
from hedgehog.config.secrets import (
    clear_secret_cache,
    fetch_secret,
    resolve_api_token,
)

__all__ = [
    # Main API
    "Config",
    "WatchConfiguration",
    "load_config",
    "build_watch_configuration",
    "parse_debounce_policy",
    "deep_merge",
    "split_csv",
    # Schema types
    "DebouncePolicy",
    "LLMConfig",
    "LoggingConfig",
    "WatchConfig",
    # Defaults
    "DEBOUNCE_WINDOW_MS",
    "DEFAULT_EXTENSIONS",
    "DEFAULT_IGNORE_PATTERNS",
    "DEFAULT_MODEL",
    "DEFAULT_SYSTEM_PROMPT",
    "MAX_OUTPUT_TOKENS",
    # Secrets
    "fetch_secret",
    "clear_secret_cache",
    "resolve_api_token",
    # Paths
    "get_config_paths",
    "get_user_config_path",
    "get_project_config_path",
]
