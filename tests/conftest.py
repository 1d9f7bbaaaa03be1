import os

# Settings are read at import time, so the test environment must be in place
# before anything from ``warden`` is imported.
os.environ["APP_ENV"] = "test"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["BCRYPT_WORK_FACTOR"] = "4"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_JSON"] = "false"
for _provider in ("GOOGLE", "GITHUB", "VK"):
    os.environ.pop(f"{_provider}_CLIENT_ID", None)
    os.environ.pop(f"{_provider}_CLIENT_SECRET", None)

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from warden.domain.services.auth.credentials import CredentialService
from warden.domain.services.auth.reset_tokens import ResetTokenService
from warden.domain.services.auth.token import TokenAuthority, TokenAuthorityConfig
from warden.infrastructure.database import create_db_and_tables
from warden.infrastructure.repositories import PasswordResetTokenRepository, UserRepository

TEST_SECRET = os.environ["JWT_SECRET"]


class FrozenClock:
    """Callable clock for services that accept an injectable ``clock``."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def token_authority():
    return TokenAuthority(TokenAuthorityConfig(secret=TEST_SECRET, ttl=timedelta(hours=1)))


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_db_and_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def user_repository(db_session):
    return UserRepository(db_session)


@pytest.fixture
def reset_token_repository(db_session):
    return PasswordResetTokenRepository(db_session)


@pytest.fixture
def credential_service(user_repository, token_authority):
    return CredentialService(user_repository, token_authority)


@pytest.fixture
def reset_token_service(reset_token_repository, credential_service):
    return ResetTokenService(reset_token_repository, credential_service, ttl=timedelta(minutes=30))
