"""
Credential Service

Username/password checks for the login form. Passwords are hashed with
passlib; the hash string records its own scheme and salt, so verification
only needs the stored value.
"""

from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from twixel.models import User
import logging

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).filter(User.username == username))
    return result.scalars().first()


async def login(db: AsyncSession, username: str, password: str) -> User | None:
    """
    Check a username/password pair.

    Returns:
        The matching User, or None when the user is unknown or the
        password does not match (the caller cannot tell which)
    """
    user = await get_user_by_username(db, username)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        logger.info(f"Failed login for {username}")
        return None
    return user


async def register(db: AsyncSession, username: str, password: str) -> User:
    """
    Create a new user with a hashed password.

    The caller is expected to have checked that the username is free;
    a concurrent registration still fails on the unique constraint.
    """
    user = User(username=username, password_hash=get_password_hash(password))
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info(f"Registered user {username}")
    return user
