"""Pytest fixtures for the event seats backend tests.

This module provides test fixtures that ensure:
1. No external API calls are made (Google endpoints are mocked per test)
2. Every app gets its own in-memory SQLite database
3. Isolated test environment with controlled configuration
"""

import os
from datetime import datetime

import pytest

# Set test environment BEFORE importing application modules
os.environ.setdefault("SESSION_SECRET", "test-session-secret-at-least-32-characters")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("CLIENT_URL", "http://localhost:3000")
os.environ.setdefault("NODE_ENV", "test")

from fastapi.testclient import TestClient

from event_seats.api.app import create_app
from event_seats.auth.session import create_access_token
from event_seats.config import Settings, get_settings
from event_seats.database.connection import create_database
from event_seats.database.models import Event, User


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings built from the test environment."""
    return get_settings()


@pytest.fixture
def make_settings(settings: Settings):
    """Copy the test settings with some fields replaced."""

    def _make(**overrides) -> Settings:
        return settings.model_copy(update=overrides)

    return _make


@pytest.fixture
def build_client(settings: Settings):
    """Factory for a running app on a fresh in-memory database.

    The client is entered (lifespan started) so all database work runs on
    the client's event loop through ``client.portal``.
    """
    clients = []

    def _build(app_settings: Settings | None = None, setup=None) -> TestClient:
        app_settings = app_settings or settings
        database = create_database(app_settings)
        app = create_app(app_settings, database)
        if setup is not None:
            setup(app)

        client = TestClient(app, raise_server_exceptions=False)
        client.__enter__()
        client.portal.call(database.create_tables)
        clients.append(client)
        return client

    yield _build

    for client in clients:
        client.portal.call(client.app.state.database.dispose)
        client.__exit__(None, None, None)


@pytest.fixture
def client(build_client) -> TestClient:
    """A running app in the test environment."""
    return build_client()


# =============================================================================
# Data helpers
# =============================================================================


def add_user(
    client: TestClient,
    email: str = "alice@example.com",
    is_admin: bool = False,
    profile_picture: str | None = None,
) -> User:
    """Insert a user directly into the app's database."""
    database = client.app.state.database

    async def _add() -> User:
        async with database.session() as session:
            user = User(
                google_id=f"google-{email}",
                email=email,
                name=email.split("@")[0].title(),
                profile_picture=profile_picture,
                is_admin=is_admin,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return client.portal.call(_add)


def add_event(client: TestClient, organizer: User, title: str = "Concert") -> Event:
    """Insert an event directly into the app's database."""
    database = client.app.state.database

    async def _add() -> Event:
        async with database.session() as session:
            event = Event(
                title=title,
                venue="Main Hall",
                starts_at=datetime(2030, 5, 1, 19, 0),
                organizer_id=organizer.id,
            )
            session.add(event)
            await session.commit()
            await session.refresh(event)
            return event

    return client.portal.call(_add)


def auth_headers(client: TestClient, user: User) -> dict[str, str]:
    """Bearer token headers for a user of this app."""
    settings = client.app.state.settings
    token = create_access_token(
        user.id, settings.session_secret, settings.access_token_max_age_seconds
    )
    return {"Authorization": f"Bearer {token}"}
