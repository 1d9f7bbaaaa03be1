from datetime import datetime, timedelta

from sqlalchemy import DateTime
from sqlmodel import Column, Field, SQLModel

from warden.domain.entities.user import new_identifier
from warden.utils.time import as_utc, utcnow


class PasswordResetToken(SQLModel, table=True):
    """A time-boxed credential that authorizes a password reset for one user.

    Several live tokens may exist for the same user; each forgot-password
    request adds a row. Reading a token does not consume it.
    """

    __tablename__ = "password_reset_tokens"

    id: str = Field(default_factory=new_identifier, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=36, ondelete="CASCADE")
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )

    def is_expired(self, ttl: timedelta, now: datetime) -> bool:
        """A token is expired once ``created_at + ttl`` lies strictly before ``now``."""
        return as_utc(self.created_at) + ttl < as_utc(now)

    def __repr__(self) -> str:
        return f"PasswordResetToken(id={self.id[:8]}..., user_id={self.user_id!r})"
