"""Dependency injection for the authentication services.

Request-scoped objects (repositories and the services built on them) are
created per request from the ``get_db`` session. The token authority, the
provider registry and the notification sink are immutable and built once per
process.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.config.settings import settings
from warden.domain.interfaces.notifications import INotificationSink
from warden.domain.interfaces.repositories import IPasswordResetTokenRepository, IUserRepository
from warden.domain.services.auth.credentials import CredentialService
from warden.domain.services.auth.reset_tokens import ResetTokenService
from warden.domain.services.auth.token import TokenAuthority, TokenAuthorityConfig
from warden.domain.services.oauth.login import OAuthLoginService
from warden.domain.services.oauth.registry import IdentityProviderRegistry
from warden.infrastructure.database import get_db
from warden.infrastructure.notifications import LoggingNotificationSink
from warden.infrastructure.oauth import build_identity_provider_registry
from warden.infrastructure.repositories import PasswordResetTokenRepository, UserRepository

AsyncDB = Annotated[AsyncSession, Depends(get_db)]

# ---------------------------------------------------------------------------
# Process-wide singletons
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_token_authority() -> TokenAuthority:
    return TokenAuthority(TokenAuthorityConfig.from_settings(settings))


@lru_cache(maxsize=1)
def get_identity_provider_registry() -> IdentityProviderRegistry:
    return build_identity_provider_registry(settings)


@lru_cache(maxsize=1)
def get_notification_sink() -> INotificationSink:
    return LoggingNotificationSink()


# ---------------------------------------------------------------------------
# Request-scoped dependencies
# ---------------------------------------------------------------------------


def get_user_repository(db: AsyncDB) -> IUserRepository:
    return UserRepository(db)


def get_password_reset_token_repository(db: AsyncDB) -> IPasswordResetTokenRepository:
    return PasswordResetTokenRepository(db)


def get_credential_service(
    users: Annotated[IUserRepository, Depends(get_user_repository)],
    tokens: Annotated[TokenAuthority, Depends(get_token_authority)],
) -> CredentialService:
    return CredentialService(users, tokens)


def get_reset_token_service(
    tokens: Annotated[IPasswordResetTokenRepository, Depends(get_password_reset_token_repository)],
    credentials: Annotated[CredentialService, Depends(get_credential_service)],
    notifier: Annotated[INotificationSink, Depends(get_notification_sink)],
) -> ResetTokenService:
    return ResetTokenService(
        tokens,
        credentials,
        notifier,
        ttl=timedelta(minutes=settings.PASSWORD_RESET_TOKEN_EXPIRATION_MINUTES),
    )


def get_oauth_login_service(
    registry: Annotated[IdentityProviderRegistry, Depends(get_identity_provider_registry)],
    credentials: Annotated[CredentialService, Depends(get_credential_service)],
) -> OAuthLoginService:
    return OAuthLoginService(registry, credentials)


CredentialServiceDep = Annotated[CredentialService, Depends(get_credential_service)]
ResetTokenServiceDep = Annotated[ResetTokenService, Depends(get_reset_token_service)]
OAuthLoginServiceDep = Annotated[OAuthLoginService, Depends(get_oauth_login_service)]
RegistryDep = Annotated[IdentityProviderRegistry, Depends(get_identity_provider_registry)]
