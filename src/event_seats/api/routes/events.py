"""Event routes.

Anyone can browse events; signed-in users create them and only the
organizer (or an admin) may change or delete one.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, model_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from event_seats.auth.dependencies import get_current_user
from event_seats.database.connection import get_db_session
from event_seats.database.models import Event, User

router = APIRouter()

_REQUIRED_FIELDS = {"title", "starts_at"}


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class EventResponse(BaseModel):
    """Event response model."""

    id: str
    title: str
    description: str | None
    venue: str | None
    starts_at: datetime
    ends_at: datetime | None
    organizer_id: str | None
    created_at: datetime | None


class EventCreate(BaseModel):
    """Create event request."""

    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    venue: str | None = Field(default=None, max_length=255)
    starts_at: datetime
    ends_at: datetime | None = None

    @model_validator(mode="after")
    def check_times(self) -> "EventCreate":
        if self.ends_at is not None and _as_utc(self.ends_at) < _as_utc(self.starts_at):
            raise ValueError("ends_at must not be before starts_at")
        return self


class EventUpdate(BaseModel):
    """Update event request. Omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    venue: str | None = Field(default=None, max_length=255)
    starts_at: datetime | None = None
    ends_at: datetime | None = None


def event_to_response(event: Event) -> EventResponse:
    return EventResponse(
        id=str(event.id),
        title=event.title,
        description=event.description,
        venue=event.venue,
        starts_at=event.starts_at,
        ends_at=event.ends_at,
        organizer_id=str(event.organizer_id) if event.organizer_id else None,
        created_at=event.created_at,
    )


def ensure_can_manage(event: Event, user: User) -> None:
    """Raise 403 unless the user organizes the event or is an admin."""
    if user.is_admin or event.organizer_id == user.id:
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Only the organizer can change this event",
    )


async def get_event_or_404(db: AsyncSession, event_id: uuid.UUID) -> Event:
    event = await db.get(Event, event_id)
    if event is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found",
        )
    return event


@router.get("", response_model=list[EventResponse], include_in_schema=False)
@router.get("/", response_model=list[EventResponse])
async def list_events(
    db: AsyncSession = Depends(get_db_session),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
) -> list[EventResponse]:
    """List events, soonest first."""
    result = await db.execute(
        select(Event).order_by(Event.starts_at).offset(skip).limit(limit)
    )
    return [event_to_response(e) for e in result.scalars().all()]


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
) -> EventResponse:
    """Get a single event."""
    return event_to_response(await get_event_or_404(db, event_id))


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> EventResponse:
    """Create an event organized by the current user."""
    event = Event(organizer_id=user.id, **data.model_dump())
    db.add(event)
    await db.commit()
    await db.refresh(event)

    return event_to_response(event)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: uuid.UUID,
    data: EventUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> EventResponse:
    """Update an event (organizer or admin)."""
    event = await get_event_or_404(db, event_id)
    ensure_can_manage(event, user)

    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(event, field, value)

    if event.ends_at is not None and _as_utc(event.ends_at) < _as_utc(event.starts_at):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="ends_at must not be before starts_at",
        )

    await db.commit()
    await db.refresh(event)

    return event_to_response(event)


@router.delete("/{event_id}")
async def delete_event(
    event_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> dict:
    """Delete an event and its seats (organizer or admin)."""
    event = await get_event_or_404(db, event_id)
    ensure_can_manage(event, user)

    await db.delete(event)
    await db.commit()

    return {"status": "deleted"}
