"""FastAPI application factory.

Builds the application around an already connected database. Nothing in
here touches the network: ``create_app`` is only called by the bootstrap
sequence once ``connect_db`` has succeeded (see ``event_seats.server``).

## Usage

```python
from event_seats.api import create_app
from event_seats.config import get_settings
from event_seats.database import connect_db

settings = get_settings()
database = await connect_db(settings)
app = create_app(settings, database)
```
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from event_seats.api.errors import register_error_handlers
from event_seats.api.routes import auth, events, feedback, seats, users
from event_seats.api.static import mount_frontend
from event_seats.auth.google import GoogleOAuth
from event_seats.config import Settings
from event_seats.database.connection import Database

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to the Home Page!"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    The database is connected before the app exists and is disposed by
    whoever connected it.
    """
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    yield

    logger.info("Shutting down")


def create_app(settings: Settings, database: Database) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Frozen configuration for this process
        database: A database that has already been connected

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Events, seats and feedback behind Google sign-in",
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
        openapi_url=None if settings.is_production else "/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    register_error_handlers(app, expose_details=not settings.is_production)

    # CORS: fixed allow-list, cookies allowed. Added after the error handler
    # so 500 responses carry the CORS headers too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Authentication strategy; the identity is restored from the session
    # cookie per request by event_seats.auth.dependencies
    app.state.oauth = GoogleOAuth(settings)

    @app.get("/", response_class=PlainTextResponse, tags=["Health"])
    async def welcome() -> str:
        """Liveness check."""
        return WELCOME_MESSAGE

    app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
    app.include_router(events.router, prefix="/events", tags=["Events"])
    app.include_router(seats.router, prefix="/api/seats", tags=["Seats"])
    app.include_router(users.router, prefix="/users", tags=["Users"])
    app.include_router(feedback.router, prefix="/api/feedback", tags=["Feedback"])

    if settings.is_production:
        mount_frontend(app, settings.static_dir)

    return app
