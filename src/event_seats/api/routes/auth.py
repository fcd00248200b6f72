"""Authentication routes.

Handles the Google OAuth login flow and the session cookie.

## OAuth Flow

1. GET /auth/google - Redirect to Google consent screen (profile, email)
2. GET /auth/google/callback - Handle OAuth callback, then redirect to
   ``{CLIENT_URL}/auth/google/success?token=...&profilePicture=...``
3. POST /auth/logout - Clear session
4. GET /auth/me - Get current user info

A failed sign-in never shows an error page: the browser is sent back to
the site root.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from event_seats.auth.dependencies import (
    get_app_settings,
    get_current_user_optional,
    get_google_oauth,
)
from event_seats.auth.google import GoogleOAuth
from event_seats.auth.session import (
    clear_session_cookie,
    create_session_token,
    set_session_cookie,
)
from event_seats.config import Settings
from event_seats.database.connection import get_db_session
from event_seats.database.models import User
from event_seats.exceptions import OAuthError

logger = logging.getLogger(__name__)

router = APIRouter()

FAILURE_REDIRECT = "/"

# Characters JavaScript's encodeURIComponent leaves alone besides alphanumerics
# and "-_.~", which quote() never escapes.
_URI_COMPONENT_SAFE = "!*'()"


class UserResponse(BaseModel):
    """User information response."""

    id: str
    email: str
    name: str | None
    profile_picture: str | None
    is_admin: bool


class AuthStatusResponse(BaseModel):
    """Authentication status response."""

    authenticated: bool
    user: UserResponse | None = None


def encode_uri_component(value: str) -> str:
    """Percent-encode a value the way encodeURIComponent does."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_success_redirect(client_url: str, token: str, profile_picture: str) -> str:
    """Frontend URL the browser lands on after a successful sign-in."""
    return (
        f"{client_url}/auth/google/success"
        f"?token={token}&profilePicture={encode_uri_component(profile_picture)}"
    )


def _failure_redirect() -> RedirectResponse:
    return RedirectResponse(url=FAILURE_REDIRECT, status_code=status.HTTP_302_FOUND)


@router.get("/google")
async def google_login(
    oauth: GoogleOAuth = Depends(get_google_oauth),
) -> RedirectResponse:
    """Initiate Google OAuth login.

    Redirects the user to Google's consent screen. After consent,
    Google redirects back to /auth/google/callback.
    """
    if not oauth.is_configured:
        raise HTTPException(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            detail="Google OAuth not configured",
        )

    auth_url = oauth.get_authorization_url(state=oauth.states.issue())
    return RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND)


@router.get("/google/callback")
async def google_callback(
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    oauth: GoogleOAuth = Depends(get_google_oauth),
    settings: Settings = Depends(get_app_settings),
    db: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    """Handle Google OAuth callback.

    Creates or updates the user, sets the session cookie and hands the
    bearer token and profile picture to the frontend.
    """
    if error:
        logger.warning(f"Google sign-in refused: {error}")
        return _failure_redirect()

    if not code or not oauth.states.consume(state):
        logger.warning("Google callback without a code or with an invalid state")
        return _failure_redirect()

    try:
        result = await oauth.authenticate(db, code)
    except OAuthError as e:
        logger.warning(f"Google sign-in failed: {e}")
        return _failure_redirect()

    redirect = RedirectResponse(
        url=build_success_redirect(
            settings.client_url, result.token, result.profile_picture
        ),
        status_code=status.HTTP_302_FOUND,
    )
    session_token = create_session_token(
        result.user.id, settings.session_secret, settings.session_max_age_seconds
    )
    set_session_cookie(redirect, session_token, settings.cookie_policy)

    return redirect


@router.post("/logout")
async def logout(
    response: Response,
    user: User | None = Depends(get_current_user_optional),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """Log out the current user.

    Clears the session cookie.
    """
    if user:
        logger.info(f"User {user.email} logged out")

    clear_session_cookie(response, settings.cookie_policy)

    return {"status": "logged_out"}


@router.get("/me", response_model=AuthStatusResponse)
async def get_auth_status(
    user: User | None = Depends(get_current_user_optional),
) -> AuthStatusResponse:
    """Get the current authentication status and user info."""
    if user:
        return AuthStatusResponse(
            authenticated=True,
            user=UserResponse(
                id=str(user.id),
                email=user.email,
                name=user.name,
                profile_picture=user.profile_picture,
                is_admin=user.is_admin,
            ),
        )

    return AuthStatusResponse(authenticated=False)
