"""Repository interfaces for abstracting data persistence in the domain layer.

These abstract base classes are the ports through which domain services reach
storage. Concrete adapters live in ``warden.infrastructure.repositories``.

Contract shared by every repository:
    - Finders return ``None`` for a missing row.
    - Mutators on a missing row raise the matching ``NotFoundError`` subclass.
    - Any other storage failure propagates unchanged.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from warden.domain.entities.password_reset_token import PasswordResetToken
from warden.domain.entities.user import User


class IUserRepository(ABC):
    """Persistence contract for the `User` aggregate."""

    @abstractmethod
    async def create_user(self, user: User) -> User:
        """Persists a new user.

        Raises:
            EmailExistsError: If the email is already taken. The store's
                unique index is the source of truth for this check.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Retrieves a user by their email address (case-insensitively)."""
        raise NotImplementedError

    @abstractmethod
    async def update_email(self, user_id: str, email: str) -> User:
        """Replaces a user's email.

        Raises:
            UserNotFoundError: If the user does not exist.
            EmailExistsError: If another user already holds the address.
        """
        raise NotImplementedError

    @abstractmethod
    async def update_password_hash(self, user_id: str, hashed_password: str) -> User:
        """Replaces a user's password hash.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete_user(self, user_id: str) -> None:
        """Deletes a user and, through the foreign key, their reset tokens.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        raise NotImplementedError


class IPasswordResetTokenRepository(ABC):
    """Persistence contract for password reset tokens."""

    @abstractmethod
    async def create_reset_token(self, user_id: str) -> PasswordResetToken:
        """Inserts a new token bound to ``user_id`` and returns it."""
        raise NotImplementedError

    @abstractmethod
    async def find_reset_token(self, token_id: str) -> Optional[PasswordResetToken]:
        raise NotImplementedError

    @abstractmethod
    async def delete_reset_token(self, token_id: str) -> None:
        """Deletes one token.

        Raises:
            ResetTokenNotFoundError: If the token does not exist.
        """
        raise NotImplementedError

    @abstractmethod
    async def sweep_reset_tokens(self, older_than: datetime) -> int:
        """Deletes every token created strictly before ``older_than``.

        Returns:
            The number of deleted rows.
        """
        raise NotImplementedError
