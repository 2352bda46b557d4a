"""Root pytest configuration for all tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from hedgehog.config.secrets import clear_secret_cache

# Redundant with asyncio_mode in pyproject.toml but ensures the plugin loads
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep user config files and HEDGEHOG_* variables out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    for var in ("HEDGEHOG_LOG", "HEDGEHOG_LOG_LEVEL", "HEDGEHOG_MODEL"):
        monkeypatch.delenv(var, raising=False)
    clear_secret_cache()
    yield
    clear_secret_cache()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A small project tree to watch."""
    root = tmp_path / "proj"
    (root / "src").mkdir(parents=True)
    (root / "node_modules" / "lib").mkdir(parents=True)
    (root / ".cache").mkdir()
    (root / "src" / "a.js").write_text("const a = 1;\n", encoding="utf-8")
    (root / "src" / "b.py").write_text("x = 1\n", encoding="utf-8")
    (root / "node_modules" / "lib" / "x.js").write_text("module.exports = 1;\n", encoding="utf-8")
    (root / ".cache" / "c.js").write_text("cached\n", encoding="utf-8")
    (root / ".eslintrc.js").write_text("module.exports = {};\n", encoding="utf-8")
    return root
