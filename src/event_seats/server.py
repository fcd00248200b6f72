"""Process bootstrap.

Startup is a straight sequence of steps, and the first failure aborts it:

1. Connect to the database (single attempt). On failure nothing else runs
   and the process exits with status 1.
2. Build the application: CORS, session cookie policy, Google strategy,
   routes, production frontend bundle, catch-all error handler.
3. Serve it with uvicorn on the configured port.
"""

from __future__ import annotations

import asyncio
import logging

import uvicorn
from pydantic import ValidationError

from event_seats.api.app import create_app
from event_seats.config import Settings, get_settings
from event_seats.database.connection import connect_db
from event_seats.exceptions import DatabaseConnectionError
from event_seats.logging_config import setup_logging

logger = logging.getLogger(__name__)


class EventSeatsServer(uvicorn.Server):
    """uvicorn server that announces itself once its sockets are bound."""

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            logger.info(f"Server running on port {self.config.port}")


async def bootstrap(settings: Settings) -> None:
    """Connect, build the app, then serve until the server is stopped.

    Raises:
        DatabaseConnectionError: If the database is unreachable; no socket
            has been bound at that point
    """
    database = await connect_db(settings)

    app = create_app(settings, database)

    server = EventSeatsServer(
        uvicorn.Config(app, host=settings.host, port=settings.port)
    )
    try:
        await server.serve()
    finally:
        await database.dispose()


def run(settings: Settings | None = None) -> int:
    """Run the server to completion and return the process exit status."""
    try:
        settings = settings or get_settings()
    except ValidationError as e:
        setup_logging()
        logger.error(f"Invalid configuration: {e}")
        return 1

    setup_logging(settings.log_level)

    try:
        asyncio.run(bootstrap(settings))
    except DatabaseConnectionError as e:
        logger.error(f"Failed to connect to the database: {e}")
        return 1

    return 0
