"""FastAPI dependencies for authentication.

The identity is restored on every request by a chain of dependencies
instead of middleware that mutates the request:

    session cookie / bearer token -> SessionData -> User

## Usage

```python
from fastapi import Depends
from event_seats.auth import get_current_user
from event_seats.database import User

@router.get("/profile")
async def get_profile(user: User = Depends(get_current_user)):
    return {"email": user.email, "name": user.name}
```
"""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from event_seats.auth.google import GoogleOAuth
from event_seats.auth.session import (
    SessionData,
    verify_access_token,
    verify_session_token,
)
from event_seats.config import Settings
from event_seats.database.connection import get_db_session
from event_seats.database.models import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


def get_google_oauth(request: Request) -> GoogleOAuth:
    """The Google strategy installed on the running app."""
    return request.app.state.oauth


async def get_session_data(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> SessionData | None:
    """Extract and verify the caller's session.

    The session cookie wins; a bearer token is the fallback for API clients.
    Returns None if neither is present and valid.
    """
    cookie = request.cookies.get(settings.session_cookie_name)
    if cookie:
        session = verify_session_token(cookie, settings.session_secret)
        if session is not None:
            return session

    if credentials is not None:
        return verify_access_token(credentials.credentials, settings.session_secret)

    return None


async def get_current_user_optional(
    session: SessionData | None = Depends(get_session_data),
    db: AsyncSession = Depends(get_db_session),
) -> User | None:
    """Get the current user if logged in, or None.

    Use this for routes that work with or without authentication.
    """
    if session is None:
        return None

    result = await db.execute(
        select(User).where(User.id == session.user_id, User.is_active.is_(True))
    )
    user = result.scalar_one_or_none()

    if user is None:
        logger.warning(f"Session for non-existent/inactive user: {session.user_id}")
        return None

    return user


async def get_current_user(
    user: User | None = Depends(get_current_user_optional),
) -> User:
    """Get the current authenticated user.

    Raises 401 if not authenticated.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


async def require_admin(
    user: User = Depends(get_current_user),
) -> User:
    """Require the current user to be an admin.

    Raises 403 if not an admin.
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )

    return user
