"""Seat routes.

Seats are plain records attached to an event. Reserving a seat flips its
flag and records the holder; a seat held by someone else is refused, but
there is no payment or hold expiry here.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from event_seats.api.routes.events import ensure_can_manage, get_event_or_404
from event_seats.auth.dependencies import get_current_user
from event_seats.database.connection import get_db_session
from event_seats.database.models import Seat, User

router = APIRouter()

# Fields a PATCH may set back to null; null is ignored for the rest
_NULLABLE_FIELDS = {"section"}


class SeatResponse(BaseModel):
    """Seat response model."""

    id: str
    event_id: str
    label: str
    section: str | None
    price_cents: int
    is_reserved: bool
    reserved_by_id: str | None


class SeatCreate(BaseModel):
    """Create seat request."""

    event_id: uuid.UUID
    label: str = Field(min_length=1, max_length=32)
    section: str | None = Field(default=None, max_length=64)
    price_cents: int = Field(default=0, ge=0)


class SeatUpdate(BaseModel):
    """Update seat request."""

    label: str | None = Field(default=None, min_length=1, max_length=32)
    section: str | None = Field(default=None, max_length=64)
    price_cents: int | None = Field(default=None, ge=0)
    is_reserved: bool | None = None


def seat_to_response(seat: Seat) -> SeatResponse:
    return SeatResponse(
        id=str(seat.id),
        event_id=str(seat.event_id),
        label=seat.label,
        section=seat.section,
        price_cents=seat.price_cents,
        is_reserved=seat.is_reserved,
        reserved_by_id=str(seat.reserved_by_id) if seat.reserved_by_id else None,
    )


async def _get_seat_or_404(db: AsyncSession, seat_id: uuid.UUID) -> Seat:
    seat = await db.get(Seat, seat_id)
    if seat is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Seat not found",
        )
    return seat


async def _commit_or_conflict(db: AsyncSession) -> None:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A seat with this label already exists for the event",
        )


@router.get("", response_model=list[SeatResponse], include_in_schema=False)
@router.get("/", response_model=list[SeatResponse])
async def list_seats(
    event_id: uuid.UUID | None = None,
    db: AsyncSession = Depends(get_db_session),
) -> list[SeatResponse]:
    """List seats, optionally for one event."""
    query = select(Seat).order_by(Seat.event_id, Seat.label)
    if event_id is not None:
        query = query.where(Seat.event_id == event_id)

    result = await db.execute(query)
    return [seat_to_response(s) for s in result.scalars().all()]


@router.get("/{seat_id}", response_model=SeatResponse)
async def get_seat(
    seat_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
) -> SeatResponse:
    """Get a single seat."""
    return seat_to_response(await _get_seat_or_404(db, seat_id))


@router.post(
    "",
    response_model=SeatResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
@router.post("/", response_model=SeatResponse, status_code=status.HTTP_201_CREATED)
async def create_seat(
    data: SeatCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SeatResponse:
    """Add a seat to an event (organizer or admin)."""
    event = await get_event_or_404(db, data.event_id)
    ensure_can_manage(event, user)

    seat = Seat(**data.model_dump())
    db.add(seat)
    await _commit_or_conflict(db)
    await db.refresh(seat)

    return seat_to_response(seat)


@router.patch("/{seat_id}", response_model=SeatResponse)
async def update_seat(
    seat_id: uuid.UUID,
    data: SeatUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SeatResponse:
    """Update a seat.

    Any signed-in user may reserve or release a seat; releasing someone
    else's reservation and editing label, section or price are reserved
    for the event organizer.
    """
    seat = await _get_seat_or_404(db, seat_id)
    event = await get_event_or_404(db, seat.event_id)

    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }
    reserve = changes.pop("is_reserved", None)

    if changes:
        ensure_can_manage(event, user)
        for field, value in changes.items():
            setattr(seat, field, value)

    if reserve is True:
        if seat.reserved_by_id not in (None, user.id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Seat is already reserved",
            )
        seat.is_reserved = True
        seat.reserved_by_id = user.id
    elif reserve is False:
        if seat.reserved_by_id not in (None, user.id):
            ensure_can_manage(event, user)
        seat.is_reserved = False
        seat.reserved_by_id = None

    await _commit_or_conflict(db)
    await db.refresh(seat)

    return seat_to_response(seat)


@router.delete("/{seat_id}")
async def delete_seat(
    seat_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> dict:
    """Delete a seat (organizer or admin)."""
    seat = await _get_seat_or_404(db, seat_id)
    event = await get_event_or_404(db, seat.event_id)
    ensure_can_manage(event, user)

    await db.delete(seat)
    await db.commit()

    return {"status": "deleted"}
