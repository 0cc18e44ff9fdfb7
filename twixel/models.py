"""
Database Models for Twixel

- User: registered accounts, identified by a unique username
- Twix: short posts written by a user (the "twixester")
"""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import declarative_base, relationship, backref
from datetime import datetime
import uuid


# Base class for all ORM models
Base = declarative_base()


def generate_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """
    User model.

    Passwords are never stored in clear, only the passlib hash.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)

    # Unique and indexed: looked up on every login and registration
    username = Column(String, unique=True, index=True, nullable=False)

    password_hash = Column(String, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Twix(Base):
    """
    A twix: a titled short post.

    Only its twixester may delete it.
    """
    __tablename__ = "twixes"

    id = Column(String(36), primary_key=True, default=generate_id)

    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)

    # Feed, list and RSS queries all order by creation time
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    twixester_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)

    # Many-to-one relationship with User
    # - backref="twixes": creates User.twixes
    # - cascade="all, delete-orphan": a deleted user takes their twixes along
    twixester = relationship("User", backref=backref("twixes", cascade="all, delete-orphan"))
