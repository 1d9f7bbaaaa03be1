"""Password reset token lifecycle.

States of a token: created on a forgot-password request, resolved (read-only,
repeatable) until it ages past its TTL, and finally removed either by a
successful password reset or by the periodic sweep.
"""

from datetime import datetime, timedelta
from typing import Optional

from structlog import get_logger

from warden.core.exceptions import (
    ResetTokenExpiredError,
    ResetTokenNotFoundError,
    UserNotFoundError,
)
from warden.domain.entities.password_reset_token import PasswordResetToken
from warden.domain.interfaces.notifications import INotificationSink
from warden.domain.interfaces.repositories import IPasswordResetTokenRepository
from warden.domain.services.auth.credentials import CredentialService
from warden.domain.services.auth.token import Clock
from warden.domain.value_objects.email import Email
from warden.domain.value_objects.password import Password
from warden.utils.time import utcnow

logger = get_logger(__name__)


def _short(token_id: str) -> str:
    return f"{token_id[:8]}..."


class ResetTokenService:
    """Creates, resolves and sweeps password reset tokens.

    ``create`` and ``request_reset`` raise ``UserNotFoundError`` for an unknown
    email, which tells the caller whether an account exists. This matches the
    registration flow, which reveals the same fact.

    Attributes:
        tokens (IPasswordResetTokenRepository): Reset token persistence port.
        credentials (CredentialService): Used to resolve users, mint sessions
            and write passwords. Only the sweep works without one.
        notifier (INotificationSink): Delivers the reset email.
        ttl (timedelta): Default token lifetime.
    """

    def __init__(
        self,
        tokens: IPasswordResetTokenRepository,
        credentials: Optional[CredentialService] = None,
        notifier: Optional[INotificationSink] = None,
        ttl: timedelta = timedelta(minutes=30),
        clock: Clock = utcnow,
    ):
        self.tokens = tokens
        self.credentials = credentials
        self.notifier = notifier
        self.ttl = ttl
        self._clock = clock

    async def create(self, email: str) -> PasswordResetToken:
        """Issue a new reset token for the account behind ``email``.

        Raises:
            InvalidEmailError: If the email is syntactically invalid.
            UserNotFoundError: If no account uses the email.
        """
        user = await self._require_credentials().get_user_by_email(email)
        if user is None:
            logger.info("reset_token_rejected_unknown_email", email=Email(email).mask_for_logging())
            raise UserNotFoundError()
        token = await self.tokens.create_reset_token(user.id)
        logger.info("reset_token_created", user_id=user.id, token=_short(token.id))
        return token

    async def request_reset(self, email: str) -> str:
        """Create a token and hand it to the notification sink.

        Returns:
            str: The sink's delivery handle.
        """
        if self.notifier is None:
            raise RuntimeError("ResetTokenService has no notification sink configured")
        token = await self.create(email)
        handle = await self.notifier.send_password_reset_email(Email(email).value, token.id)
        logger.info("reset_email_handed_to_sink", token=_short(token.id), handle=handle)
        return handle

    async def resolve_user(self, token_id: str, ttl: Optional[timedelta] = None) -> str:
        """Return the user bound to a live token.

        The token is left in place, so the same token resolves again until it
        expires.

        Raises:
            ResetTokenNotFoundError: If the token does not exist.
            ResetTokenExpiredError: If ``created_at + ttl`` is before now.
        """
        token = await self.tokens.find_reset_token(token_id)
        if token is None:
            raise ResetTokenNotFoundError()
        if token.is_expired(ttl if ttl is not None else self.ttl, self._clock()):
            logger.info("reset_token_expired", token=_short(token_id))
            raise ResetTokenExpiredError()
        return token.user_id

    async def login_with_token(self, token_id: str) -> str:
        """Resolve a reset token and issue a session token for its owner."""
        user_id = await self.resolve_user(token_id)
        return await self._require_credentials().login_by_id(user_id)

    async def reset_password(self, token_id: str, new_password: str) -> None:
        """Consume the token, then set a new password for its owner.

        The token is deleted before the password is written, so of two
        concurrent resets with the same token only the one whose delete lands
        changes the password. A weak password is rejected before the token is
        touched.

        Raises:
            ResetTokenNotFoundError: If the token does not exist or was
                consumed concurrently.
            ResetTokenExpiredError: If the token has expired.
            WeakPasswordError: If the new password is too short.
        """
        credentials = self._require_credentials()
        user_id = await self.resolve_user(token_id)
        checked = Password(new_password)
        await self.tokens.delete_reset_token(token_id)
        logger.info("reset_token_consumed", user_id=user_id, token=_short(token_id))
        await credentials.set_password(user_id, checked.value)

    async def sweep(self, older_than: datetime) -> int:
        """Delete every token created before ``older_than``.

        Meant for a periodic job, not request handling.
        """
        deleted = await self.tokens.sweep_reset_tokens(older_than)
        logger.info("reset_tokens_swept", cutoff=older_than.isoformat(), deleted=deleted)
        return deleted

    def _require_credentials(self) -> CredentialService:
        if self.credentials is None:
            raise RuntimeError("ResetTokenService has no credential service configured")
        return self.credentials
