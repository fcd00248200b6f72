"""Authentication module for the event seats backend.

Delegates identity to Google and keeps the result in a signed session
cookie.

## OAuth Flow

1. Browser hits /auth/google and is redirected to Google's consent screen
2. Google redirects back to /auth/google/callback with an authorization code
3. The code is exchanged for a Google access token and the profile is read
4. The local user is created or updated
5. A session cookie is set and the browser is sent to the frontend with a
   bearer token and the profile picture URL

## Scopes

- profile: For display name and picture
- email: To identify the user
"""

from event_seats.auth.dependencies import (
    get_current_user,
    get_current_user_optional,
    get_session_data,
    require_admin,
)
from event_seats.auth.google import AuthResult, GoogleOAuth, StateStore
from event_seats.auth.session import (
    SessionData,
    create_access_token,
    create_session_token,
    verify_access_token,
    verify_session_token,
)

__all__ = [
    "AuthResult",
    "GoogleOAuth",
    "StateStore",
    "SessionData",
    "create_access_token",
    "create_session_token",
    "verify_access_token",
    "verify_session_token",
    "get_current_user",
    "get_current_user_optional",
    "get_session_data",
    "require_admin",
]
