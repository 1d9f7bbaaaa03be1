"""User Repository implementation using SQLAlchemy.

Each mutation commits its own transaction. Email uniqueness is enforced by
the unique index on ``users.email``; an ``IntegrityError`` from that index is
translated into ``EmailExistsError`` so that concurrent duplicate
registrations fail cleanly instead of surfacing as a 500.
"""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from warden.core.exceptions import EmailExistsError, UserNotFoundError
from warden.core.logging import mask_email
from warden.domain.entities.password_reset_token import PasswordResetToken
from warden.domain.entities.user import User
from warden.domain.interfaces.repositories import IUserRepository
from warden.utils.time import utcnow

logger = get_logger(__name__)


class UserRepository(IUserRepository):
    """SQLAlchemy implementation of ``IUserRepository``.

    Args:
        db_session: Request-scoped async session.
    """

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def create_user(self, user: User) -> User:
        user.email = user.email.lower()
        self.db_session.add(user)
        try:
            await self.db_session.commit()
        except IntegrityError as exc:
            await self.db_session.rollback()
            logger.info("user_insert_conflict", email=mask_email(user.email))
            raise EmailExistsError() from exc
        await self.db_session.refresh(user)
        logger.debug("user_created", user_id=user.id)
        return user

    async def find_by_id(self, user_id: str) -> Optional[User]:
        result = await self.db_session.execute(select(User).where(User.id == user_id))
        return result.scalars().first()

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db_session.execute(select(User).where(User.email == email.lower()))
        user = result.scalars().first()
        logger.debug("user_lookup_by_email", email=mask_email(email), found=user is not None)
        return user

    async def _require(self, user_id: str) -> User:
        user = await self.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    async def update_email(self, user_id: str, email: str) -> User:
        user = await self._require(user_id)
        user.email = email.lower()
        user.updated_at = utcnow()
        try:
            await self.db_session.commit()
        except IntegrityError as exc:
            await self.db_session.rollback()
            raise EmailExistsError() from exc
        await self.db_session.refresh(user)
        return user

    async def update_password_hash(self, user_id: str, hashed_password: str) -> User:
        user = await self._require(user_id)
        user.hashed_password = hashed_password
        user.updated_at = utcnow()
        await self.db_session.commit()
        await self.db_session.refresh(user)
        return user

    async def delete_user(self, user_id: str) -> None:
        user = await self._require(user_id)
        await self.db_session.execute(
            delete(PasswordResetToken)
            .where(PasswordResetToken.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        await self.db_session.delete(user)
        await self.db_session.commit()
        logger.info("user_deleted", user_id=user_id)
