"""
Asynchronous database infrastructure.

Provides the async SQLAlchemy engine, a session factory, the ``get_db``
FastAPI dependency, table creation and a retried health check.

**Security Note**: DATABASE_URL carries credentials. It is never logged.
"""

import time
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from structlog import get_logger
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from warden.core.config.settings import settings

# Imported for their side effect of registering tables on SQLModel.metadata.
from warden.domain.entities import password_reset_token as _password_reset_token  # noqa: F401
from warden.domain.entities import user as _user  # noqa: F401

logger = get_logger(__name__)

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    pool_pre_ping=True,
)

AsyncSessionFactory: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields a request-scoped ``AsyncSession``.

    The transaction is rolled back if the request raises, and the session is
    always closed.
    """
    async with AsyncSessionFactory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.debug("database_session_rolled_back")
            raise


async def create_db_and_tables(bind: AsyncEngine = engine) -> None:
    """Create every table known to ``SQLModel.metadata``. Migrations remain the source of truth in production."""
    start_time = time.time()
    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info(
        "database_tables_created",
        execution_time=time.time() - start_time,
        tables=list(SQLModel.metadata.tables.keys()),
    )


async def check_database_health(bind: AsyncEngine = engine) -> bool:
    """
    Run ``SELECT 1``, retrying transient connection failures with backoff.

    Returns:
        bool: True if the database answered, False otherwise.
    """
    start_time = time.time()
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(settings.DATABASE_HEALTH_RETRIES),
            wait=wait_exponential(multiplier=0.5, max=5),
            retry=retry_if_exception_type(OperationalError),
            reraise=True,
        ):
            with attempt:
                async with bind.connect() as conn:
                    await conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error(
            "database_health_check_failed",
            error=type(exc).__name__,
            execution_time=time.time() - start_time,
        )
        return False
    logger.info("database_health_check_success", execution_time=time.time() - start_time)
    return True
