"""Entry point for running ai-hedgehog.

Usage:
    ai-hedgehog -d ./src
    python -m hedgehog -d ./src --model replicate/anthropic/claude-3.7-sonnet
"""

import sys

from hedgehog.cli import main as cli_main


def main() -> None:
    """Run the watcher and exit with its status code."""
    sys.exit(cli_main())


if __name__ == "__main__":
    main()
