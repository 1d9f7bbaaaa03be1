"""Main application settings and configuration management.

This module composes all the application settings from the different modules
(app, database, auth) into a single, accessible `Settings` class.

It loads settings from environment variables and .env files and provides a
single `settings` object for use throughout the application. Validation of
deployment-critical fields is deferred to `validate_required_fields`, which
runs during application initialization.

Environment Support:
- Development: Uses .env
- Test: Uses .env.test when present, secret checks relaxed
- Staging / Production: Uses .env.staging / .env.production
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings

logger = logging.getLogger(__name__)
logging.getLogger("passlib").setLevel(logging.ERROR)

MIN_JWT_SECRET_LENGTH = 32


class Settings(AppSettings, DatabaseSettings, AuthSettings):
    """The main settings class that aggregates all application configurations.

    It inherits from all the specialized settings classes, providing a unified
    interface to all configuration parameters.

    Usage:
        - Access settings via the singleton instance `settings` throughout the application.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    @property
    def is_test(self) -> bool:
        return self.APP_ENV == "test"

    def validate_required_fields(self) -> None:
        """Validates that deployment-critical settings are present.

        Raises:
            ValueError: If JWT_SECRET is missing or too short outside the test
                environment.
        """
        secret = self.JWT_SECRET.get_secret_value()
        if len(secret) < MIN_JWT_SECRET_LENGTH:
            error_msg = f"JWT_SECRET must be at least {MIN_JWT_SECRET_LENGTH} characters long"
            if self.is_test:
                logger.warning("Test mode: %s", error_msg)
            else:
                logger.error(error_msg)
                raise ValueError(error_msg)
        else:
            logger.info("All required environment variables are set.")


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "test": ".env.test",
        "staging": ".env.staging",
        "production": ".env.production",
    }
    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info("Loading environment configuration from %s", env_file)
        return Settings(_env_file=env_file)
    return Settings()


# Create a singleton instance of the settings to be used across the application.
settings = create_settings()
