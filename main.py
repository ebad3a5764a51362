# main.py
"""CLI entry point for lyricsmith."""

from __future__ import annotations

import sys

from orchestration.cli_runner import run


def main() -> None:
    """Run the command given on the command line and exit with its status."""
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
