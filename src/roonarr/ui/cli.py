from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from roonarr.app import (
    cache_summary,
    check_target,
    resolve_album,
    retry_pending_albums,
    run_service,
)
from roonarr.common import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Keep Lidarr in sync with albums added to the Roon library"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("run", help="Run the hourly reconciliation loop")
    subparsers.add_parser("status", help="Show a summary of the album cache")

    retry = subparsers.add_parser("retry", help="Retry albums that are still pending")
    retry.add_argument(
        "--force",
        action="store_true",
        help="Ignore the retry cool-down and retry every pending album",
    )

    subparsers.add_parser("check", help="Test the connection to Lidarr")

    resolve = subparsers.add_parser("resolve", help="Look up an album on MusicBrainz")
    resolve.add_argument("title", type=str, help="Album title")
    resolve.add_argument("artist", type=str, help="Album artist")

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "run":
            run_service()
        elif parsed_args.command == "status":
            cache_summary()
        elif parsed_args.command == "retry":
            retry_pending_albums(force=parsed_args.force)
        elif parsed_args.command == "check":
            if check_target() is None:
                sys.exit(1)
        elif parsed_args.command == "resolve":
            resolve_album(parsed_args.title, parsed_args.artist)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
