"""FastAPI application and routes.

## API Structure

- / - Welcome text (liveness)
- /auth - Google sign-in and session endpoints
- /events - Events
- /api/seats - Seats attached to events
- /users - User profiles
- /api/feedback - Visitor feedback

In production any other GET path serves the frontend bundle.

## Authentication

Endpoints that need a user accept the session cookie set at sign-in or an
``Authorization: Bearer`` token handed to the frontend.
"""

from event_seats.api.app import create_app

__all__ = ["create_app"]
