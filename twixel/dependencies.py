"""
Authentication Dependencies for FastAPI Routes

Route handlers declare what they need from the session:
- get_user_id: the session user id, or None
- require_user_id: the session user id, redirecting to the login page if absent
- get_optional_user: the full User, or None
- require_user: the full User, redirecting to the login page if there is none
"""

from urllib.parse import urlencode
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from twixel.database import get_db
from twixel.models import User
from twixel.services.session import COOKIE_NAME, SessionState, verify_session_token
import logging

logger = logging.getLogger(__name__)


class LoginRequired(Exception):
    """
    Raised when an action needs a logged in user and there is none.

    Turned into a redirect to /login?redirectTo=<path> by the handler
    registered in main.py.
    """

    def __init__(self, redirect_to: str):
        super().__init__(redirect_to)
        self.redirect_to = redirect_to

    @property
    def login_url(self) -> str:
        return "/login?" + urlencode({"redirectTo": self.redirect_to})


async def get_user_id(request: Request) -> str | None:
    """
    Dependency returning the user id stored in the session cookie.

    A tampered or expired cookie is treated like no cookie at all.
    """
    session = verify_session_token(request.cookies.get(COOKIE_NAME))
    if session.state is SessionState.INVALID:
        logger.warning(f"Rejected invalid session cookie from {request.client.host if request.client else 'unknown'}")
    return session.user_id if session.is_valid else None


async def require_user_id(
    request: Request,
    user_id: str | None = Depends(get_user_id)
) -> str:
    """
    Dependency that requires a logged in user.

    Raises:
        LoginRequired: carrying the current path so the login page can send
                       the user back once they are authenticated
    """
    if not user_id:
        raise LoginRequired(request.url.path)
    return user_id


async def get_optional_user(
    user_id: str | None = Depends(get_user_id),
    db: AsyncSession = Depends(get_db)
) -> User | None:
    """
    Dependency resolving the session to a User.

    Returns None for anonymous visitors and for sessions whose user no
    longer exists.
    """
    if not user_id:
        return None
    result = await db.execute(select(User).filter(User.id == user_id))
    return result.scalars().first()


async def require_user(
    request: Request,
    user: User | None = Depends(get_optional_user)
) -> User:
    """
    Dependency for actions that write on behalf of the session user.

    A valid cookie whose user was removed counts as no login at all, so
    nothing gets stored under a user id that does not exist.

    Raises:
        LoginRequired: same as require_user_id
    """
    if user is None:
        raise LoginRequired(request.url.path)
    return user
