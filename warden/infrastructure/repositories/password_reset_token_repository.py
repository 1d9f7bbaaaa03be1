"""Password reset token repository using SQLAlchemy."""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from warden.core.exceptions import ResetTokenNotFoundError
from warden.domain.entities.password_reset_token import PasswordResetToken
from warden.domain.entities.user import new_identifier
from warden.domain.interfaces.repositories import IPasswordResetTokenRepository
from warden.utils.time import as_utc, utcnow

logger = get_logger(__name__)


class PasswordResetTokenRepository(IPasswordResetTokenRepository):
    """SQLAlchemy implementation of ``IPasswordResetTokenRepository``.

    Timestamps are written as UTC. SQLite drops the offset, so the sweep
    cutoff is normalized to UTC before comparison.
    """

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def create_reset_token(self, user_id: str) -> PasswordResetToken:
        token = PasswordResetToken(id=new_identifier(), user_id=user_id, created_at=utcnow())
        self.db_session.add(token)
        await self.db_session.commit()
        await self.db_session.refresh(token)
        return token

    async def find_reset_token(self, token_id: str) -> Optional[PasswordResetToken]:
        result = await self.db_session.execute(
            select(PasswordResetToken).where(PasswordResetToken.id == token_id)
        )
        return result.scalars().first()

    async def delete_reset_token(self, token_id: str) -> None:
        result = await self.db_session.execute(
            delete(PasswordResetToken)
            .where(PasswordResetToken.id == token_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db_session.rollback()
            raise ResetTokenNotFoundError()
        await self.db_session.commit()

    async def sweep_reset_tokens(self, older_than: datetime) -> int:
        result = await self.db_session.execute(
            delete(PasswordResetToken)
            .where(PasswordResetToken.created_at < as_utc(older_than))
            .execution_options(synchronize_session=False)
        )
        await self.db_session.commit()
        logger.debug("reset_token_sweep_executed", deleted=result.rowcount)
        return result.rowcount
