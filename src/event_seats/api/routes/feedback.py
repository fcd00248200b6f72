"""Feedback routes.

Visitors leave a rating (optionally about an event) with or without
signing in; admins read and prune it.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from event_seats.api.routes.events import get_event_or_404
from event_seats.auth.dependencies import get_current_user_optional, require_admin
from event_seats.database.connection import get_db_session
from event_seats.database.models import Feedback, User

router = APIRouter()


class FeedbackCreate(BaseModel):
    """Submit feedback request."""

    rating: int = Field(ge=1, le=5)
    message: str | None = Field(default=None, max_length=2000)
    event_id: uuid.UUID | None = None


class FeedbackResponse(BaseModel):
    """Feedback response model."""

    id: str
    rating: int
    message: str | None
    event_id: str | None
    user_id: str | None
    created_at: datetime | None


def feedback_to_response(feedback: Feedback) -> FeedbackResponse:
    return FeedbackResponse(
        id=str(feedback.id),
        rating=feedback.rating,
        message=feedback.message,
        event_id=str(feedback.event_id) if feedback.event_id else None,
        user_id=str(feedback.user_id) if feedback.user_id else None,
        created_at=feedback.created_at,
    )


@router.post(
    "",
    response_model=FeedbackResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
@router.post("/", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    data: FeedbackCreate,
    user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db_session),
) -> FeedbackResponse:
    """Submit feedback. Signed-in users are recorded as the author."""
    if data.event_id is not None:
        await get_event_or_404(db, data.event_id)

    feedback = Feedback(
        rating=data.rating,
        message=data.message,
        event_id=data.event_id,
        user_id=user.id if user else None,
    )
    db.add(feedback)
    await db.commit()
    await db.refresh(feedback)

    return feedback_to_response(feedback)


@router.get("", response_model=list[FeedbackResponse], include_in_schema=False)
@router.get("/", response_model=list[FeedbackResponse])
async def list_feedback(
    event_id: uuid.UUID | None = None,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> list[FeedbackResponse]:
    """List feedback, newest first (admin only)."""
    query = select(Feedback).order_by(Feedback.created_at.desc())
    if event_id is not None:
        query = query.where(Feedback.event_id == event_id)

    result = await db.execute(query)
    return [feedback_to_response(f) for f in result.scalars().all()]


@router.delete("/{feedback_id}")
async def delete_feedback(
    feedback_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> dict:
    """Delete a feedback entry (admin only)."""
    feedback = await db.get(Feedback, feedback_id)
    if feedback is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Feedback not found",
        )

    await db.delete(feedback)
    await db.commit()

    return {"status": "deleted"}
