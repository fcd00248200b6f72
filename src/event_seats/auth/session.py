"""Session management using signed JWT tokens.

Two kinds of token are signed with the session secret:

- ``session``: stored in an HTTP-only cookie, restores the logged-in user
  on each request.
- ``access``: handed to the frontend after login and presented as
  ``Authorization: Bearer <token>``.

## Cookie policy

- HTTP-only, so scripts cannot read the session
- Secure in production (HTTPS only)
- SameSite=Strict
- Issued only after a successful login and never re-issued for an
  unchanged session

## Token Structure

```json
{
  "sub": "user-uuid",
  "iat": 1234567890,
  "exp": 1235172690,
  "type": "session"
}
```
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Response
from jose import JWTError, jwt

from event_seats.config import CookiePolicy

logger = logging.getLogger(__name__)

# JWT configuration
ALGORITHM = "HS256"
SESSION_TOKEN_TYPE = "session"
ACCESS_TOKEN_TYPE = "access"


@dataclass(frozen=True)
class SessionData:
    """Data carried by a verified token."""

    user_id: uuid.UUID
    created_at: datetime
    expires_at: datetime

    @property
    def is_expired(self) -> bool:
        """Check if the session has expired."""
        return datetime.now(timezone.utc) > self.expires_at


def _create_token(
    user_id: uuid.UUID,
    secret: str,
    token_type: str,
    expires_delta: timedelta,
) -> str:
    now = datetime.now(timezone.utc)
    expires_at = now + expires_delta

    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
        "type": token_type,
    }

    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def _verify_token(token: str, secret: str, token_type: str) -> SessionData | None:
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.debug(f"Token verification failed: {e}")
        return None

    if payload.get("type") != token_type:
        logger.debug(f"Expected {token_type} token, got {payload.get('type')}")
        return None

    try:
        user_id = uuid.UUID(payload["sub"])
        created_at = datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    except (KeyError, TypeError, ValueError) as e:
        logger.debug(f"Invalid token payload: {e}")
        return None

    session = SessionData(
        user_id=user_id,
        created_at=created_at,
        expires_at=expires_at,
    )

    if session.is_expired:
        logger.debug("Token expired")
        return None

    return session


def create_session_token(
    user_id: uuid.UUID,
    secret: str,
    max_age_seconds: int,
) -> str:
    """Create a signed session token for a user.

    Args:
        user_id: The user's UUID
        secret: Session signing secret
        max_age_seconds: Lifetime of the session

    Returns:
        Signed JWT token string
    """
    return _create_token(
        user_id, secret, SESSION_TOKEN_TYPE, timedelta(seconds=max_age_seconds)
    )


def verify_session_token(token: str, secret: str) -> SessionData | None:
    """Verify and decode a session token.

    Returns:
        SessionData if valid, None if invalid, expired or not a session token
    """
    return _verify_token(token, secret, SESSION_TOKEN_TYPE)


def create_access_token(
    user_id: uuid.UUID,
    secret: str,
    max_age_seconds: int,
) -> str:
    """Create the bearer token handed to the frontend after login."""
    return _create_token(
        user_id, secret, ACCESS_TOKEN_TYPE, timedelta(seconds=max_age_seconds)
    )


def verify_access_token(token: str, secret: str) -> SessionData | None:
    """Verify a bearer token. Session tokens are not accepted here."""
    return _verify_token(token, secret, ACCESS_TOKEN_TYPE)


def set_session_cookie(response: Response, token: str, policy: CookiePolicy) -> None:
    """Attach the session cookie to a response."""
    response.set_cookie(
        key=policy.name,
        value=token,
        max_age=policy.max_age,
        httponly=policy.httponly,
        secure=policy.secure,
        samesite=policy.samesite,
    )


def clear_session_cookie(response: Response, policy: CookiePolicy) -> None:
    """Expire the session cookie on the client."""
    response.delete_cookie(
        key=policy.name,
        httponly=policy.httponly,
        secure=policy.secure,
        samesite=policy.samesite,
    )
