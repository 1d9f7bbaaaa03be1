from __future__ import annotations

"""Factory for generating fake user data for testing."""

from datetime import datetime, timezone
from typing import Optional

from faker import Faker

from warden.domain.entities.user import User, new_identifier

fake = Faker()


def create_fake_user(
    id: Optional[str] = None,
    email: Optional[str] = None,
    name: Optional[str] = None,
    hashed_password: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> User:
    """Create a fake User entity for testing.

    Args:
        id (Optional[str]): User ID, defaults to a fresh UUID4.
        email (Optional[str]): Email, defaults to a fake, lower-cased address.
        name (Optional[str]): Display name, defaults to a fake name.
        hashed_password (Optional[str]): Password hash, defaults to None.
        created_at (Optional[datetime]): Creation timestamp, defaults to now.

    Returns:
        User: A User entity populated with fake data.
    """
    now = created_at or datetime.now(timezone.utc)
    return User(
        id=id or new_identifier(),
        email=(email or fake.unique.safe_email()).lower(),
        name=name if name is not None else fake.name(),
        hashed_password=hashed_password,
        created_at=now,
        updated_at=now,
    )
