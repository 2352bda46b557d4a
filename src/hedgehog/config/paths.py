"""Platform-aware configuration path resolution.

- Windows user config: %APPDATA%\\hedgehog\\config.yaml
- Unix user config: $XDG_CONFIG_HOME/hedgehog/, ~/.config/hedgehog/ or ~/.hedgehog/
- Project config: <watched root>/.hedgehog/config.yaml
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

CONFIG_FILENAME = "config.yaml"
APP_NAME = "hedgehog"
SHORT_NAME = ".hedgehog"


def get_user_config_path() -> Path | None:
    """Get user-level config path. The file may not exist."""
    if sys.platform == "win32":
        app_data = os.environ.get("APPDATA")
        if app_data:
            return Path(app_data) / APP_NAME / CONFIG_FILENAME
        return None

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME / CONFIG_FILENAME

    home = Path.home()
    xdg_default = home / ".config"
    if xdg_default.exists():
        return xdg_default / APP_NAME / CONFIG_FILENAME

    return home / SHORT_NAME / CONFIG_FILENAME


def get_project_config_path(root_directory: str | Path) -> Path:
    """Get project-level config path inside the watched directory."""
    return Path(root_directory) / SHORT_NAME / CONFIG_FILENAME


def get_config_paths(root_directory: str | Path | None = None) -> list[Path]:
    """Get all config paths in priority order (lowest to highest)."""
    paths: list[Path] = []

    user_path = get_user_config_path()
    if user_path:
        paths.append(user_path)

    if root_directory:
        paths.append(get_project_config_path(root_directory))

    return paths
