"""Application lifecycle management.

Handles startup and shutdown: database health check and table creation on
startup, engine disposal on shutdown.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from structlog import get_logger

from warden.core.config.settings import settings
from warden.infrastructure.database import check_database_health, create_db_and_tables, engine
from warden.infrastructure.dependency_injection.auth_dependencies import get_identity_provider_registry

logger = get_logger(__name__)


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown of application resources.

        Raises:
            RuntimeError: If the database is unavailable during startup
        """
        if not await check_database_health():
            logger.error("database_unavailable_on_startup")
            raise RuntimeError("Database unavailable")
        await create_db_and_tables()
        registry = get_identity_provider_registry()
        logger.info(
            "application_startup",
            env=settings.APP_ENV,
            version=settings.VERSION,
            oauth_providers=registry.supported_providers(),
        )

        yield

        await engine.dispose()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
