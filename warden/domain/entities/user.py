from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime
from sqlmodel import Column, Field, SQLModel, String

from warden.utils.time import utcnow


def new_identifier() -> str:
    """Return a fresh opaque identifier (UUID4, canonical string form)."""
    return str(uuid4())


class User(SQLModel, table=True):
    """Represents a User entity and acts as an Aggregate Root.

    Users authenticate either with an email/password pair or through an
    external identity provider, in which case ``hashed_password`` is ``None``
    until a password is set through the reset flow.

    Attributes:
        id: Opaque unique identifier (UUID4 string).
        email: Unique address, stored lower-cased. The unique index is the
            authoritative guard against concurrent duplicate registrations.
        name: Optional display name.
        hashed_password: bcrypt hash. Never serialized outward.
        created_at: Creation timestamp (UTC).
        updated_at: Timestamp of the last mutation (UTC).
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_identifier, primary_key=True, max_length=36)
    email: str = Field(
        sa_column=Column(String(320), unique=True, index=True, nullable=False),
        description="Unique, lower-cased email address.",
    )
    name: Optional[str] = Field(default=None, max_length=255)
    hashed_password: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    def __repr__(self) -> str:
        # Keeps the password hash out of reprs and tracebacks.
        return f"User(id={self.id!r}, email={self.email!r})"
