"""Event Seats - a thin backend for events, seats, users and feedback.

Sign-in is delegated to Google; the session lives in a signed cookie and
persistence is handled by SQLAlchemy.
"""

__version__ = "0.1.0"
