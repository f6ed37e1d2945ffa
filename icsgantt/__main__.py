"""Command-line entry for icsgantt."""

from __future__ import annotations

import argparse
import sys
from typing import NoReturn

from . import run_server


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the icsgantt CLI."""
    parser = argparse.ArgumentParser(
        prog="icsgantt",
        description="icsgantt - view and edit an ICS calendar on a Gantt timeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m icsgantt                    # Start server on default port (8080)
  python -m icsgantt --port 3000        # Start server on port 3000
        """,
    )

    parser.add_argument(
        "--port",
        type=int,
        metavar="PORT",
        help="Port number for the web server (default: 8080, or from ICSGANTT_WEB_PORT env var)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging for icsgantt modules",
    )

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Run the icsgantt CLI."""
    parser = _create_parser()
    args = parser.parse_args(argv)

    run_server(args)
    sys.exit(0)


if __name__ == "__main__":
    main()
