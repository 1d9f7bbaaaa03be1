"""Security utilities for password hashing and verification.

bcrypt is deliberately slow. The async helpers run it in a worker thread and
cap the number of concurrent hashes per event loop with an anyio
``CapacityLimiter`` sized by ``PASSWORD_HASHING_CONCURRENCY``, so a burst of
logins queues instead of starving the thread pool.
"""

import asyncio
import weakref
from typing import Optional

import anyio
import anyio.to_thread
from passlib.context import CryptContext

from warden.core.config.settings import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_WORK_FACTOR,
)

_limiters: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, anyio.CapacityLimiter]" = (
    weakref.WeakKeyDictionary()
)


def _hashing_limiter() -> anyio.CapacityLimiter:
    loop = asyncio.get_running_loop()
    limiter = _limiters.get(loop)
    if limiter is None:
        limiter = anyio.CapacityLimiter(settings.PASSWORD_HASHING_CONCURRENCY)
        _limiters[loop] = limiter
    return limiter


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        str: Bcrypt-hashed password
    """
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its hash.

    A missing hash (accounts created through an identity provider) never
    verifies.

    Security:
        - Constant-time comparison via bcrypt
    """
    if not hashed_password:
        return False
    return pwd_context.verify(password, hashed_password)


async def hash_password_async(password: str) -> str:
    """Hash a password in a worker thread, bounded by the hashing limiter."""
    return await anyio.to_thread.run_sync(hash_password, password, limiter=_hashing_limiter())


async def verify_password_async(password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password in a worker thread, bounded by the hashing limiter."""
    if not hashed_password:
        return False
    return await anyio.to_thread.run_sync(
        verify_password, password, hashed_password, limiter=_hashing_limiter()
    )
