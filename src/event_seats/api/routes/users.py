"""User management routes."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from event_seats.auth.dependencies import get_current_user, require_admin
from event_seats.database.connection import get_db_session
from event_seats.database.models import User

router = APIRouter()


class UserResponse(BaseModel):
    """User response model."""

    id: str
    email: str
    name: str | None
    profile_picture: str | None
    is_active: bool
    is_admin: bool
    created_at: datetime | None
    last_login_at: datetime | None


class UserListResponse(BaseModel):
    """User list response."""

    users: list[UserResponse]
    total: int


class UserUpdate(BaseModel):
    """Update profile request."""

    name: str | None = Field(default=None, min_length=1, max_length=255)


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        email=user.email,
        name=user.name,
        profile_picture=user.profile_picture,
        is_active=user.is_active,
        is_admin=user.is_admin,
        created_at=user.created_at,
        last_login_at=user.last_login_at,
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(
    user: User = Depends(get_current_user),
) -> UserResponse:
    """Get the current user's profile."""
    return user_to_response(user)


@router.patch("/me", response_model=UserResponse)
async def update_current_user_profile(
    data: UserUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    """Update the current user's display name."""
    if data.name is not None:
        user.name = data.name

    await db.commit()
    await db.refresh(user)

    return user_to_response(user)


@router.delete("/me")
async def delete_current_user(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> dict:
    """Delete the current user's account."""
    await db.delete(user)
    await db.commit()

    return {"status": "deleted"}


# Admin routes


@router.get("", response_model=UserListResponse, include_in_schema=False)
@router.get("/", response_model=UserListResponse)
async def list_users(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
) -> UserListResponse:
    """List all users (admin only)."""
    result = await db.execute(
        select(User).order_by(User.email).offset(skip).limit(limit)
    )
    users = result.scalars().all()

    total = await db.scalar(select(func.count()).select_from(User))

    return UserListResponse(
        users=[user_to_response(u) for u in users],
        total=total or 0,
    )
