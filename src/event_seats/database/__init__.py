"""Database module for the event seats backend.

This module provides:
- SQLAlchemy async database connection with a startup connectivity check
- User, event, seat and feedback models
"""

from event_seats.database.connection import (
    Database,
    connect_db,
    create_database,
    get_db_session,
)
from event_seats.database.models import (
    Base,
    Event,
    Feedback,
    Seat,
    User,
)

__all__ = [
    # Connection
    "Database",
    "connect_db",
    "create_database",
    "get_db_session",
    # Models
    "Base",
    "Event",
    "Feedback",
    "Seat",
    "User",
]
