"""Tests for the command-line entry point."""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from rich.console import Console

from hedgehog.app import HedgehogApp
from hedgehog.cli import create_parser, main


def make_console() -> Console:
    return Console(file=io.StringIO(), width=240, color_system=None)


def output_of(console: Console) -> str:
    return console.file.getvalue()


class TestParser:
    def test_directory_is_required(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as excinfo:
            create_parser().parse_args([])
        assert excinfo.value.code == 2
        assert "--directory" in capsys.readouterr().err

    def test_short_flags(self) -> None:
        args = create_parser().parse_args(
            ["-d", "src", "-t", "tok", "-i", "a,b", "-e", ".py", "-m", "gpt-4o", "-s", "Be nice", "-v"]
        )

        assert args.directory == Path("src")
        assert args.token == "tok"
        assert args.ignore == "a,b"
        assert args.extensions == ".py"
        assert args.model == "gpt-4o"
        assert args.system == "Be nice"
        assert args.verbose is True

    def test_optional_flags_default_to_none(self) -> None:
        args = create_parser().parse_args(["-d", "."])

        assert args.ignore is None
        assert args.extensions is None
        assert args.debounce_policy is None
        assert args.serialize is None

    def test_debounce_policy_choices(self) -> None:
        with pytest.raises(SystemExit):
            create_parser().parse_args(["-d", ".", "--debounce-policy", "never"])


class TestStartupErrors:
    """Configuration problems exit with status 1 before watching starts."""

    def test_missing_token(self, project: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("REPLICATE_API_TOKEN", raising=False)
        monkeypatch.chdir(tmp_path)
        console = make_console()

        assert main(["-d", str(project)], console) == 1

        output = output_of(console)
        assert "Error:" in output
        assert "REPLICATE_API_TOKEN" in output

    def test_missing_directory(self, tmp_path: Path) -> None:
        console = make_console()

        assert main(["-d", str(tmp_path / "nope"), "-t", "tok"], console) == 1
        assert "Directory not found" in output_of(console)

    def test_invalid_ignore_pattern(self, project: Path) -> None:
        console = make_console()

        assert main(["-d", str(project), "-t", "tok", "-i", "node_modules,("], console) == 1
        assert "Invalid ignore pattern" in output_of(console)

    def test_empty_extensions(self, project: Path) -> None:
        console = make_console()

        assert main(["-d", str(project), "-t", "tok", "-e", " , "], console) == 1


class TestRun:
    """Startup summary and shutdown."""

    def test_summary_then_run(self, project: Path) -> None:
        console = make_console()

        with patch.object(HedgehogApp, "run", new_callable=AsyncMock) as mock_run:
            code = main(
                ["-d", str(project), "-t", "tok", "-i", "vendor", "-e", ".py,.js", "-m", "gpt-4o"],
                console,
            )

        assert code == 0
        mock_run.assert_awaited_once()

        output = output_of(console)
        assert "Your friendly AI coding companion" in output
        assert f"Watching directory: {project.resolve()}" in output
        assert "Ignoring: vendor" in output
        assert "Watching file types: .js, .py" in output
        assert "Using model: gpt-4o" in output

    def test_interrupt_stops_cleanly(self, project: Path) -> None:
        console = make_console()

        with patch.object(HedgehogApp, "run", new_callable=AsyncMock, side_effect=KeyboardInterrupt):
            with patch.object(HedgehogApp, "stop") as mock_stop:
                code = main(["-d", str(project), "-t", "tok"], console)

        assert code == 0
        mock_stop.assert_called_once()
        assert "AI-Hedgehog stopped." in output_of(console)

    def test_token_from_secrets_file(
        self, project: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("REPLICATE_API_TOKEN", raising=False)
        monkeypatch.chdir(tmp_path)
        (project / ".env.secrets").write_text("REPLICATE_API_TOKEN=r8_file\n", encoding="utf-8")
        console = make_console()

        with patch.object(HedgehogApp, "run", new_callable=AsyncMock):
            assert main(["-d", str(project)], console) == 0
