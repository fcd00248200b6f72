"""Command-line interface for the event seats backend."""

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from event_seats import __version__
from event_seats.config import get_settings
from event_seats.database.connection import connect_db
from event_seats.exceptions import DatabaseConnectionError
from event_seats.logging_config import setup_logging
from event_seats.server import run

logger = logging.getLogger(__name__)


async def _init_db(settings) -> None:
    database = await connect_db(settings)
    try:
        await database.create_tables()
    finally:
        await database.dispose()


def main(argv=None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Event Seats - events, seats and feedback behind Google sign-in"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--host", help="Interface to bind (default: HOST)")
    serve_parser.add_argument(
        "--port", type=int, help="Port to listen on (default: PORT or 5000)"
    )

    # Init-db command
    subparsers.add_parser("init-db", help="Create the database tables")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    if args.command == "serve":
        overrides = {}
        if args.host is not None:
            overrides["host"] = args.host
        if args.port is not None:
            overrides["port"] = args.port
        return run(settings.model_copy(update=overrides))

    if args.command == "init-db":
        setup_logging(settings.log_level)
        try:
            asyncio.run(_init_db(settings))
        except DatabaseConnectionError as e:
            logger.error(f"Failed to connect to the database: {e}")
            return 1
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
