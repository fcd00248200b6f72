"""Google OAuth authentication.

Implements the OAuth 2.0 authorization code flow for Google sign-in and
turns a successful sign-in into a local user plus a bearer token.

## Required Setup

1. Create OAuth 2.0 credentials (Web application) in Google Cloud Console
2. Add the callback URL (GOOGLE_REDIRECT_URI) to the authorized redirect URIs
3. Set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET environment variables

## OAuth Endpoints

- Authorization: https://accounts.google.com/o/oauth2/v2/auth
- Token: https://oauth2.googleapis.com/token
- User Info: https://www.googleapis.com/oauth2/v2/userinfo

## Scopes Used

- profile: Get user's name and picture
- email: Get user's email address
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from urllib.parse import quote, urlencode

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from event_seats.auth.session import create_access_token
from event_seats.config import Settings
from event_seats.database.models import User
from event_seats.exceptions import OAuthError

logger = logging.getLogger(__name__)

# Google OAuth endpoints
GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

SCOPES = ["profile", "email"]

# State tokens expire after 10 minutes
STATE_MAX_AGE_SECONDS = 600


@dataclass
class GoogleUserInfo:
    """User information from Google."""

    id: str
    email: str
    name: str | None
    picture: str | None


@dataclass
class AuthResult:
    """Outcome of a successful sign-in."""

    user: User
    token: str
    profile_picture: str


class StateStore:
    """Single-use OAuth ``state`` values for CSRF protection.

    Values live in process memory, which matches the single-process server.
    """

    def __init__(self, max_age_seconds: int = STATE_MAX_AGE_SECONDS):
        self.max_age_seconds = max_age_seconds
        self._states: dict[str, datetime] = {}

    def issue(self) -> str:
        """Generate and remember a new state value."""
        self._purge()
        state = secrets.token_urlsafe(32)
        self._states[state] = datetime.now(timezone.utc)
        return state

    def consume(self, state: str | None) -> bool:
        """Verify and forget a state value."""
        if not state or state not in self._states:
            return False

        created = self._states.pop(state)
        age = (datetime.now(timezone.utc) - created).total_seconds()
        return age < self.max_age_seconds

    def _purge(self) -> None:
        now = datetime.now(timezone.utc)
        expired = [
            state
            for state, created in self._states.items()
            if (now - created).total_seconds() >= self.max_age_seconds
        ]
        for state in expired:
            del self._states[state]


class GoogleOAuth:
    """Google OAuth 2.0 strategy.

    Example:
        ```python
        oauth = GoogleOAuth(settings)

        # Generate authorization URL
        auth_url = oauth.get_authorization_url(state=oauth.states.issue())
        # Redirect user to auth_url

        # Handle callback
        result = await oauth.authenticate(db, code)
        ```
    """

    def __init__(self, settings: Settings, scopes: list[str] | None = None):
        self.settings = settings
        self.client_id = settings.google_client_id
        self.client_secret = settings.google_client_secret
        self.redirect_uri = settings.google_redirect_uri
        self.scopes = scopes or list(SCOPES)
        self.states = StateStore()

        if not self.is_configured:
            logger.warning(
                "Google OAuth not configured. Set GOOGLE_CLIENT_ID and "
                "GOOGLE_CLIENT_SECRET environment variables."
            )

    @property
    def is_configured(self) -> bool:
        """Check if Google OAuth is properly configured."""
        return bool(self.client_id and self.client_secret)

    def get_authorization_url(self, state: str) -> str:
        """Generate the Google OAuth authorization URL.

        Args:
            state: Random state parameter for CSRF protection

        Returns:
            URL to redirect the user to
        """
        if not self.is_configured:
            raise OAuthError("Google OAuth not configured")

        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.scopes),
            "state": state,
        }

        return f"{GOOGLE_AUTHORIZE_URL}?{urlencode(params, quote_via=quote)}"

    async def exchange_code(self, code: str) -> str:
        """Exchange an authorization code for a Google access token.

        Raises:
            OAuthError: If Google is unreachable, refuses the code or answers
                with an unusable body
        """
        if not self.is_configured:
            raise OAuthError("Google OAuth not configured")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    GOOGLE_TOKEN_URL,
                    data={
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "code": code,
                        "grant_type": "authorization_code",
                        "redirect_uri": self.redirect_uri,
                    },
                )
        except httpx.HTTPError as e:
            raise OAuthError(f"Token exchange failed: {e!r}") from e

        if response.status_code != 200:
            logger.error(f"Token exchange failed: {response.text}")
            raise OAuthError(f"Token exchange failed: {response.status_code}")

        try:
            return response.json()["access_token"]
        except ValueError as e:
            raise OAuthError("Token response is not JSON") from e
        except (KeyError, TypeError) as e:
            raise OAuthError("Token response carried no access_token") from e

    async def get_user_info(self, access_token: str) -> GoogleUserInfo:
        """Get user information from Google.

        Raises:
            OAuthError: If Google is unreachable, refuses the token or answers
                with an unusable body
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    GOOGLE_USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
        except httpx.HTTPError as e:
            raise OAuthError(f"User info request failed: {e!r}") from e

        if response.status_code != 200:
            logger.error(f"User info request failed: {response.text}")
            raise OAuthError(f"User info request failed: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise OAuthError("User info response is not JSON") from e

        try:
            return GoogleUserInfo(
                id=data["id"],
                email=data["email"],
                name=data.get("name"),
                picture=data.get("picture"),
            )
        except (KeyError, TypeError) as e:
            raise OAuthError(f"User info missing field {e}") from e

    async def authenticate(self, db: AsyncSession, code: str) -> AuthResult:
        """Complete a sign-in: exchange the code, upsert the user, issue a token.

        Raises:
            OAuthError: If the provider rejects the code or the profile lookup
        """
        access_token = await self.exchange_code(code)
        user_info = await self.get_user_info(access_token)

        user = await upsert_user(db, user_info)

        token = create_access_token(
            user.id,
            self.settings.session_secret,
            self.settings.access_token_max_age_seconds,
        )
        return AuthResult(
            user=user,
            token=token,
            profile_picture=user.profile_picture or self.settings.default_profile_picture,
        )


async def upsert_user(db: AsyncSession, user_info: GoogleUserInfo) -> User:
    """Find the user by Google id, creating or refreshing the record."""
    result = await db.execute(select(User).where(User.google_id == user_info.id))
    user = result.scalar_one_or_none()

    now = datetime.now(timezone.utc)
    if user:
        user.email = user_info.email
        user.name = user_info.name
        user.profile_picture = user_info.picture
        user.last_login_at = now
    else:
        user = User(
            google_id=user_info.id,
            email=user_info.email,
            name=user_info.name,
            profile_picture=user_info.picture,
            last_login_at=now,
        )
        db.add(user)

    await db.commit()
    await db.refresh(user)

    logger.info(f"User {user.email} signed in with Google")
    return user
