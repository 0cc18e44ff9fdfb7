"""
Database Connection and Session Management

This module sets up SQLAlchemy's async database engine and provides
a dependency injection function for FastAPI routes to access database sessions.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from twixel.config import settings


# Create async database engine
# - Uses aiosqlite by default, asyncpg when DATABASE_URL points at PostgreSQL
# - Connection pool is automatically managed by SQLAlchemy
engine = create_async_engine(settings.DATABASE_URL, echo=False)


def enable_sqlite_foreign_keys(async_engine):
    """
    SQLite leaves foreign key constraints unchecked unless every connection
    turns them on, so a twix could point at a user that does not exist.
    No-op for other databases.
    """
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


enable_sqlite_foreign_keys(engine)


# Session factory for creating database sessions
# - expire_on_commit=False: objects stay readable after commit, the async
#   session cannot lazily refresh them inside a template render
AsyncSessionLocal = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_db():
    """
    Database session dependency for FastAPI routes.

    Usage in FastAPI routes:
        @router.get("/twixes")
        async def route(db: AsyncSession = Depends(get_db)):
            result = await db.execute(select(Twix))

    The async context manager closes the session once the request is done,
    even if the handler raised.
    """
    async with AsyncSessionLocal() as session:
        yield session
