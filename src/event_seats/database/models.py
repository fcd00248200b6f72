"""Database models for the event seats backend.

## Schema Overview

```
users
├── events (1:N, as organizer)
├── seats (1:N, as holder of a reservation)
└── feedback (1:N)
events
├── seats (1:N)
└── feedback (1:N)
```

Column types are dialect-neutral so the same models run on PostgreSQL in
production and SQLite in tests.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models."""


class User(Base):
    """User account model.

    Users are created on their first Google sign-in. The google_id is the
    provider's identifier, while we keep our own UUID for internal use.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    google_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(255))
    profile_picture: Mapped[str | None] = mapped_column(String(1024))

    # Account status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Relationships
    events: Mapped[list["Event"]] = relationship(back_populates="organizer")
    feedback: Mapped[list["Feedback"]] = relationship(back_populates="user")

    def __repr__(self) -> str:
        return f"<User {self.email}>"


class Event(Base):
    """An event that seats can be attached to."""

    __tablename__ = "events"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organizer_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL")
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    venue: Mapped[str | None] = mapped_column(String(255))
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ends_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    organizer: Mapped["User"] = relationship(back_populates="events")
    seats: Mapped[list["Seat"]] = relationship(
        back_populates="event", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("ix_events_starts_at", "starts_at"),)

    def __repr__(self) -> str:
        return f"<Event {self.title[:30]}>"


class Seat(Base):
    """A seat belonging to an event.

    Reservation is a plain flag plus the holder; nothing here arbitrates
    between competing reservations.
    """

    __tablename__ = "seats"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )

    label: Mapped[str] = mapped_column(String(32), nullable=False)  # e.g. "A12"
    section: Mapped[str | None] = mapped_column(String(64))
    price_cents: Mapped[int] = mapped_column(Integer, default=0)

    is_reserved: Mapped[bool] = mapped_column(Boolean, default=False)
    reserved_by_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL")
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    event: Mapped["Event"] = relationship(back_populates="seats")

    __table_args__ = (
        UniqueConstraint("event_id", "label", name="uq_event_seat_label"),
        Index("ix_seats_event", "event_id"),
    )

    def __repr__(self) -> str:
        return f"<Seat {self.label} event_id={self.event_id}>"


class Feedback(Base):
    """Feedback left by a visitor, optionally about a specific event."""

    __tablename__ = "feedback"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL")
    )
    event_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("events.id", ondelete="CASCADE")
    )

    rating: Mapped[int] = mapped_column(Integer, nullable=False)  # 1..5
    message: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="feedback")

    __table_args__ = (Index("ix_feedback_event", "event_id"),)

    def __repr__(self) -> str:
        return f"<Feedback rating={self.rating}>"
