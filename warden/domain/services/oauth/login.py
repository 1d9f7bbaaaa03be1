"""OAuth callback handling: provider code in, local session token out."""

from dataclasses import dataclass

from structlog import get_logger

from warden.core.exceptions import NoEmailAvailableError
from warden.domain.entities.user import User
from warden.domain.services.auth.credentials import CredentialService
from warden.domain.services.oauth.registry import IdentityProviderRegistry
from warden.domain.value_objects.identity_profile import IdentityProfile

logger = get_logger(__name__)


@dataclass(frozen=True)
class OAuthLoginResult:
    access_token: str
    profile: IdentityProfile
    user: User


class OAuthLoginService:
    """Completes an OAuth login.

    Steps: exchange the code, load the provider profile, find or create the
    local user by email, then issue a local session token. The provider
    profile is not persisted. An existing account is only signed into when
    the provider reports the email as verified.
    """

    def __init__(self, registry: IdentityProviderRegistry, credentials: CredentialService):
        self.registry = registry
        self.credentials = credentials

    async def handle_callback(self, provider: str, code: str) -> OAuthLoginResult:
        """
        Raises:
            ProviderNotFoundError: If the provider is not configured.
            ExchangeFailedError: If the code cannot be exchanged.
            ProviderUserInfoError: If the profile cannot be loaded.
            NoEmailAvailableError: If the provider has no email for the user.
            EmailExistsError: If an unverified email belongs to an existing
                account.
        """
        token = await self.registry.exchange(provider, code)
        profile = await self.registry.get_user_info(provider, token)
        if not profile.email:
            logger.warning("oauth_profile_without_email", **profile.mask_for_logging())
            raise NoEmailAvailableError()

        user = await self.credentials.provision_external_user(
            profile.email, profile.name, link_existing=profile.email_verified
        )
        access_token = await self.credentials.login_by_id(user.id)
        logger.info("oauth_login_succeeded", user_id=user.id, **profile.mask_for_logging())
        return OAuthLoginResult(access_token=access_token, profile=profile, user=user)
