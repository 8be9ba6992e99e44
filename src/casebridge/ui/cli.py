# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from casebridge.app import handle_message, initialize_database
from casebridge.config import configure_logging
from casebridge.domain.model import MessageKind

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile ZDS case messages")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log resolver decisions (DEBUG level)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    handle = subparsers.add_parser("handle", help="Process one inbound ZDS message")
    handle.add_argument(
        "file",
        type=str,
        help="Path to the SOAP message, or - to read standard input",
    )
    handle.add_argument(
        "--kind",
        type=str,
        choices=[kind.value for kind in MessageKind],
        help="Message kind (detected from the SOAP body when omitted)",
    )

    init_db = subparsers.add_parser("init-db", help="Apply database migrations")
    init_db.add_argument(
        "--database-uri",
        type=str,
        help="Database URI (defaults to DATABASE_URI or the data directory)",
    )

    return parser.parse_args(list(argv))


def _read_message(source: str) -> bytes:
    if source == "-":
        return sys.stdin.buffer.read()
    path = Path(source)
    if not path.is_file():
        raise ValueError(f"Message file not found: {source}")
    return path.read_bytes()


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "handle":
            response = handle_message(_read_message(parsed_args.file), parsed_args.kind)
            log.info("Response status %s", response.status)
            print(response.body)
        elif parsed_args.command == "init-db":
            uri = initialize_database(parsed_args.database_uri)
            log.info("Database ready at %s", uri)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error while processing %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)
