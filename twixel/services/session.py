"""
Session Token Service

The session cookie carries a signed JWT whose "sub" claim is the user id.
There is no server-side session store: a valid signature is the session.

Verification never raises. It returns a SessionToken whose state tells the
caller whether a cookie was present and, if so, whether it could be trusted.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from fastapi.responses import RedirectResponse
from jose import jwt, JWTError
from twixel.config import settings


ALGORITHM = "HS256"

# Name of the cookie holding the session token
COOKIE_NAME = "twixel_session"


class SessionState(str, Enum):
    VALID = "valid"
    ABSENT = "absent"
    INVALID = "invalid"


@dataclass(frozen=True)
class SessionToken:
    state: SessionState
    user_id: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.state is SessionState.VALID


def create_session_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """
    Sign a session token for the given user.

    Args:
        user_id: Id of the logged in user, stored in the "sub" claim
        expires_delta: Token lifetime, defaults to SESSION_MAX_AGE so the
                       token never outlives the cookie carrying it

    Returns:
        Encoded JWT string
    """
    if expires_delta is None:
        expires_delta = timedelta(seconds=settings.SESSION_MAX_AGE)
    expire = datetime.utcnow() + expires_delta
    to_encode = {"sub": user_id, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def verify_session_token(token: str | None) -> SessionToken:
    """
    Check a session token taken from the cookie.

    Returns:
        SessionToken(VALID, user_id) for a well signed, unexpired token,
        SessionToken(ABSENT) when there is no token at all,
        SessionToken(INVALID) for anything else
    """
    if not token:
        return SessionToken(SessionState.ABSENT)

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return SessionToken(SessionState.INVALID)

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        return SessionToken(SessionState.INVALID)
    return SessionToken(SessionState.VALID, user_id)


def create_user_session(user_id: str, redirect_to: str) -> RedirectResponse:
    """
    Log a user in: redirect to redirect_to with the session cookie set.

    Status code 303 makes the browser follow up with a GET after the form POST.
    """
    response = RedirectResponse(url=redirect_to, status_code=303)
    response.set_cookie(
        key=COOKIE_NAME,
        value=create_session_token(user_id),
        httponly=True,  # not readable from JavaScript
        max_age=settings.SESSION_MAX_AGE,
        samesite="lax",
        secure=settings.session_cookie_secure,
        path="/",
    )
    return response


def destroy_user_session(redirect_to: str = "/login") -> RedirectResponse:
    response = RedirectResponse(url=redirect_to, status_code=303)
    response.delete_cookie(COOKIE_NAME, path="/")
    return response
