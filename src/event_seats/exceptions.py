"""Exception types raised by the event seats backend."""

from __future__ import annotations


class EventSeatsError(Exception):
    """Base class for application errors."""


class DatabaseConnectionError(EventSeatsError):
    """The database could not be reached at startup."""


class OAuthError(EventSeatsError):
    """The identity provider rejected or failed a request."""
