"""
Application Configuration Module

Settings are read with Pydantic's BaseSettings from the environment and an
optional .env file in the project root, so secrets stay out of version control.
"""

from pydantic_settings import BaseSettings
from pydantic import field_validator
import logging

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Priority order:
    1. Environment variables
    2. .env file (if exists)
    3. Default values
    """

    # Key used to sign the session token stored in the cookie
    SECRET_KEY: str

    # Async SQLAlchemy connection string
    # SQLite (aiosqlite) for local work, PostgreSQL (asyncpg) in production
    DATABASE_URL: str = "sqlite+aiosqlite:///./twixel.db"

    # "production" turns on Secure cookies
    ENVIRONMENT: str = "production"

    # Session cookie lifetime in seconds (30 days)
    SESSION_MAX_AGE: int = 60 * 60 * 24 * 30

    # Rate limiting for the login and new-twix actions
    # memory:// keeps counters per process; redis://host:6379 shares them
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    LOG_LEVEL: str = "INFO"

    @field_validator("DATABASE_URL")
    def validate_database_url(cls, value):
        if value.startswith("postgresql://"):
            logger.warning("DATABASE_URL uses the sync postgres driver, switching to asyncpg")
            return value.replace("postgresql://", "postgresql+asyncpg://", 1)
        return value

    @property
    def session_cookie_secure(self) -> bool:
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"


# Global settings instance used throughout the application
settings = Settings()
