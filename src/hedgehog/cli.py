"""Command-line interface for ai-hedgehog."""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.text import Text

from hedgehog import __version__
from hedgehog.app import HedgehogApp
from hedgehog.config import (
    DEFAULT_EXTENSIONS,
    DEFAULT_IGNORE_PATTERNS,
    DEFAULT_MODEL,
    DEFAULT_SYSTEM_PROMPT,
    WatchConfiguration,
    build_watch_configuration,
    load_config,
    resolve_api_token,
    split_csv,
)
from hedgehog.config.schema import DebouncePolicy
from hedgehog.core.llm import LiteLLMProvider
from hedgehog.errors import ConfigurationError
from hedgehog.logging import get_logger, setup_logging
from hedgehog.output import ConsoleSink

log = get_logger("cli")

BANNER = r"""
    _    ___      _   _          _              _
   / \  |_ _|    | | | | ___  __| | __ _  ___  | |__   ___   __ _
  / _ \  | |_____| |_| |/ _ \/ _` |/ _` |/ _ \ | '_ \ / _ \ / _` |
 / ___ \ | |_____|  _  |  __/ (_| | (_| |  __/ | | | | (_) | (_| |
/_/   \_\___|    |_| |_|\___|\__,_|\__, |\___| |_| |_|\___/ \__, |
                                   |___/                    |___/
"""


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ai-hedgehog",
        description="AI feedback on your code as you write",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-d", "--directory",
        required=True,
        type=Path,
        help="Directory to watch for changes",
    )
    parser.add_argument(
        "-t", "--token",
        help="API token for the model provider (default: provider env var, "
        "e.g. REPLICATE_API_TOKEN)",
    )
    parser.add_argument(
        "-i", "--ignore",
        help=f"Comma-separated patterns to ignore (default: {','.join(DEFAULT_IGNORE_PATTERNS)})",
    )
    parser.add_argument(
        "-e", "--extensions",
        help=f"Comma-separated file extensions to watch (default: {','.join(DEFAULT_EXTENSIONS)})",
    )
    parser.add_argument(
        "-m", "--model",
        help=f"Model ID, in litellm form (default: {DEFAULT_MODEL})",
    )
    parser.add_argument(
        "-s", "--system",
        help=f"Custom system prompt (default: '{DEFAULT_SYSTEM_PROMPT}')",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--debounce-policy",
        choices=[p.value for p in DebouncePolicy],
        help="Debounce all files together (global) or each file separately (per-path)",
    )
    parser.add_argument(
        "--serialize",
        action="store_true",
        default=None,
        help="Run feedback requests one at a time instead of letting them overlap",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Extra config file (YAML), applied over user and project config",
    )
    return parser


def print_banner(console: Console) -> None:
    console.print(Text(BANNER, style="cyan"))
    console.print(Text("Your friendly AI coding companion 🦔\n", style="cyan"))


def print_summary(sink: ConsoleSink, config: WatchConfiguration) -> None:
    sink.status(f"🔍 Watching directory: {config.root_directory}")
    sink.status(f"🚫 Ignoring: {', '.join(config.ignore_patterns)}")
    sink.status(f"👁️  Watching file types: {', '.join(sorted(config.watched_extensions))}")
    sink.status(f"🤖 Using model: {config.model_identifier}")


def build_app(args: argparse.Namespace, console: Console) -> tuple[HedgehogApp, ConsoleSink]:
    """Resolve configuration and construct the app.

    Raises:
        ConfigurationError: On any invalid or missing setting.
    """
    config = load_config(root_directory=args.directory, config_file=args.config)
    setup_logging(config.logging, verbose=args.verbose)

    watch_config = build_watch_configuration(
        args.directory,
        config,
        ignore=split_csv(args.ignore) if args.ignore is not None else None,
        extensions=split_csv(args.extensions) if args.extensions is not None else None,
        model=args.model,
        system_prompt=args.system,
        debounce_policy=args.debounce_policy,
        serialize_dispatches=args.serialize,
        verbose=args.verbose,
    )

    token = resolve_api_token(
        watch_config.model_identifier,
        args.token,
        search_dirs=(watch_config.root_directory,),
    )
    client = LiteLLMProvider(
        watch_config.model_identifier,
        api_key=token,
        api_base=watch_config.api_base,
    )
    sink = ConsoleSink(console, verbose=watch_config.verbose)
    return HedgehogApp(watch_config, client, sink), sink


def main(argv: Sequence[str] | None = None, console: Console | None = None) -> int:
    """Run the CLI. Returns the process exit code."""
    args = create_parser().parse_args(argv)
    console = console or Console(highlight=False)

    print_banner(console)

    try:
        app, sink = build_app(args, console)
    except ConfigurationError as e:
        console.print(Text(f"Error: {e}", style="red"))
        return 1

    print_summary(sink, app.config)

    try:
        asyncio.run(app.run())
    except KeyboardInterrupt:
        app.stop()
        sink.notice("\n👋 AI-Hedgehog stopped.")
    return 0
