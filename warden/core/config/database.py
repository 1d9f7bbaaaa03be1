"""
Database connection settings.
"""
from pydantic import Field
from pydantic_settings import BaseSettings


class DatabaseSettings(BaseSettings):
    """
    Defines settings for the asynchronous database connection.

    The URL must name an async driver, e.g. ``postgresql+asyncpg://...`` in
    production or ``sqlite+aiosqlite:///./warden.db`` for local runs.

    Security Note:
        - DATABASE_URL embeds credentials; never log it unmasked
          (OWASP A09:2021 - Security Logging and Monitoring Failures).
    """
    DATABASE_URL: str = "sqlite+aiosqlite:///./warden.db"
    DATABASE_ECHO: bool = False
    DATABASE_HEALTH_RETRIES: int = Field(ge=1, default=3)
