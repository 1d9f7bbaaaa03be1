"""Credential lifecycle: registration, login, token validation and credential changes."""

from typing import Optional, Tuple

from structlog import get_logger

from warden.core.exceptions import (
    EmailExistsError,
    InvalidCredentialsError,
    InvalidEmailError,
    UserNotFoundError,
)
from warden.core.logging import mask_email
from warden.domain.entities.user import User, new_identifier
from warden.domain.interfaces.repositories import IUserRepository
from warden.domain.services.auth.token import TokenAuthority
from warden.domain.value_objects.email import Email
from warden.domain.value_objects.password import Password
from warden.domain.value_objects.session_claims import AuthenticatedIdentity, SessionClaims
from warden.utils.security import hash_password_async, verify_password_async

logger = get_logger(__name__)


class CredentialService:
    """
    Service owning every mutation of a user's credentials.

    Passwords are hashed with bcrypt in a bounded worker pool (see
    ``warden.utils.security``). Session tokens are minted by the injected
    ``TokenAuthority``; this service never signs anything itself.

    Login failures are coarse: a missing account, an account without a
    password and a wrong password all raise the same
    ``InvalidCredentialsError``. Registration does reveal that an email is
    taken.

    Attributes:
        users (IUserRepository): User persistence port.
        tokens (TokenAuthority): Session token signer/verifier.
    """

    def __init__(self, users: IUserRepository, tokens: TokenAuthority):
        self.users = users
        self.tokens = tokens

    async def register(self, email: str, password: str, name: Optional[str] = None) -> User:
        """
        Create a new password-based account.

        No session token is issued; callers that want to sign the user in
        call ``login_by_id`` afterwards.

        Args:
            email (str): Address for the account; normalized to lowercase.
            password (str): Plain-text password, at least 8 characters.
            name (Optional[str]): Display name.

        Returns:
            User: The persisted user.

        Raises:
            WeakPasswordError: If the password is too short.
            InvalidEmailError: If the email is syntactically invalid.
            EmailExistsError: If the email is already registered. The
                pre-check below is advisory; the store's unique index catches
                concurrent duplicates.
        """
        checked_password = Password(password)
        checked_email = Email(email)

        if await self.users.find_by_email(checked_email.value) is not None:
            logger.info("registration_rejected_email_exists", email=checked_email.mask_for_logging())
            raise EmailExistsError()

        user = User(
            id=new_identifier(),
            email=checked_email.value,
            name=name,
            hashed_password=await hash_password_async(checked_password.value),
        )
        user = await self.users.create_user(user)
        logger.info("user_registered", user_id=user.id, email=checked_email.mask_for_logging())
        return user

    async def login(self, email: str, password: str) -> str:
        """
        Authenticate an email/password pair and issue a session token.

        The address is normalized exactly as at registration, so an IDN or
        non-NFC spelling of a registered email still finds its account.

        Raises:
            InvalidCredentialsError: For any authentication failure,
                including a syntactically invalid email.
        """
        try:
            lookup = Email(email).value
        except InvalidEmailError as exc:
            logger.warning("login_failed", email=mask_email(email))
            raise InvalidCredentialsError() from exc

        user = await self.users.find_by_email(lookup)
        if user is None or not await verify_password_async(password, user.hashed_password):
            logger.warning("login_failed", email=mask_email(email))
            raise InvalidCredentialsError()

        logger.info("login_succeeded", user_id=user.id)
        return self.tokens.issue(user.id, user.email)

    async def login_by_id(self, user_id: str) -> str:
        """
        Issue a session token for a user already authenticated by another channel.

        Only for internal flows such as a validated reset token or an OAuth
        callback; never route unauthenticated input here.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        user = await self.get_profile(user_id)
        return self.tokens.issue(user.id, user.email)

    async def validate_token(self, token: str) -> User:
        """
        Verify a session token and re-resolve its user.

        Raises:
            TokenExpiredError: If the token is authentic but expired.
            InvalidTokenError: If the token is not authentic.
            UserNotFoundError: If the user behind the token no longer exists.
        """
        _, user = await self._resolve(token)
        return user

    async def authenticate(self, token: str) -> AuthenticatedIdentity:
        """Validate a bearer token and describe the caller for protected operations."""
        claims, user = await self._resolve(token)
        return AuthenticatedIdentity(user_id=user.id, email=user.email, claims=claims)

    async def _resolve(self, token: str) -> Tuple[SessionClaims, User]:
        claims = self.tokens.verify(token)
        user = await self.users.find_by_id(claims.user_id)
        if user is None:
            logger.warning("token_subject_missing", user_id=claims.user_id)
            raise UserNotFoundError()
        return claims, user

    async def get_profile(self, user_id: str) -> User:
        user = await self.users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return await self.users.find_by_email(Email(email).value)

    async def update_password(self, user_id: str, old_password: str, new_password: str) -> None:
        """
        Change a password after re-checking the current one.

        Raises:
            UserNotFoundError: If the user does not exist.
            InvalidCredentialsError: If ``old_password`` does not match.
            WeakPasswordError: If ``new_password`` is too short.
        """
        user = await self.get_profile(user_id)
        if not await verify_password_async(old_password, user.hashed_password):
            logger.warning("password_change_rejected", user_id=user_id)
            raise InvalidCredentialsError()
        await self.set_password(user_id, new_password)

    async def set_password(self, user_id: str, new_password: str) -> None:
        """
        Replace a password without checking the old one.

        Used by the reset flow, where possession of a reset token stands in
        for the old password.
        """
        checked = Password(new_password)
        await self.users.update_password_hash(user_id, await hash_password_async(checked.value))
        logger.info("password_updated", user_id=user_id)

    async def update_email(self, user_id: str, new_email: str) -> User:
        """
        Change a user's email address.

        Raises:
            InvalidEmailError: If the address is syntactically invalid.
            UserNotFoundError: If the user does not exist.
            EmailExistsError: If another account holds the address.
        """
        checked = Email(new_email)
        user = await self.users.update_email(user_id, checked.value)
        logger.info("email_updated", user_id=user_id, email=checked.mask_for_logging())
        return user

    async def provision_external_user(
        self, email: str, name: Optional[str] = None, link_existing: bool = True
    ) -> User:
        """
        Find the account for a provider-supplied email, creating it if absent.

        Accounts created here have no password until one is set through the
        reset flow. A concurrent creation of the same email is resolved by
        re-reading the winner's row.

        Args:
            email (str): Address reported by the identity provider.
            name (Optional[str]): Display name for a new account.
            link_existing (bool): Whether an existing account with this email
                may be signed into. Pass ``False`` when the provider has not
                verified the address.

        Raises:
            EmailExistsError: If the email belongs to an existing account and
                ``link_existing`` is false.
        """
        checked = Email(email)
        user = await self.users.find_by_email(checked.value)
        if user is not None:
            if not link_existing:
                logger.warning("external_link_refused", user_id=user.id, email=checked.mask_for_logging())
                raise EmailExistsError()
            return user
        try:
            user = await self.users.create_user(User(id=new_identifier(), email=checked.value, name=name or None))
        except EmailExistsError:
            user = await self.users.find_by_email(checked.value)
            if user is None or not link_existing:
                raise
            return user
        logger.info("external_user_provisioned", user_id=user.id, email=checked.mask_for_logging())
        return user
