"""Builds the identity provider registry from settings."""

from typing import List, Optional

from structlog import get_logger

from warden.core.config.settings import Settings
from warden.domain.interfaces.identity_provider import IIdentityProvider
from warden.domain.services.oauth.registry import IdentityProviderRegistry
from warden.infrastructure.oauth.base import ClientFactory
from warden.infrastructure.oauth.github import GitHubIdentityProvider
from warden.infrastructure.oauth.google import GoogleIdentityProvider
from warden.infrastructure.oauth.vk import VKIdentityProvider

logger = get_logger(__name__)


def build_identity_provider_registry(
    settings: Settings, client_factory: Optional[ClientFactory] = None
) -> IdentityProviderRegistry:
    """Register every provider whose client id and secret are both set."""
    timeout = settings.OAUTH_HTTP_TIMEOUT_SECONDS
    providers: List[IIdentityProvider] = []

    google_secret = settings.GOOGLE_CLIENT_SECRET.get_secret_value()
    if settings.GOOGLE_CLIENT_ID and google_secret:
        providers.append(
            GoogleIdentityProvider(
                settings.GOOGLE_CLIENT_ID,
                google_secret,
                settings.oauth_redirect_url("google"),
                timeout=timeout,
                client_factory=client_factory,
            )
        )

    github_secret = settings.GITHUB_CLIENT_SECRET.get_secret_value()
    if settings.GITHUB_CLIENT_ID and github_secret:
        providers.append(
            GitHubIdentityProvider(
                settings.GITHUB_CLIENT_ID,
                github_secret,
                settings.oauth_redirect_url("github"),
                timeout=timeout,
                client_factory=client_factory,
            )
        )

    vk_secret = settings.VK_CLIENT_SECRET.get_secret_value()
    if settings.VK_CLIENT_ID and vk_secret:
        providers.append(
            VKIdentityProvider(
                settings.VK_CLIENT_ID,
                vk_secret,
                settings.oauth_redirect_url("vk"),
                api_version=settings.VK_API_VERSION,
                timeout=timeout,
                client_factory=client_factory,
            )
        )

    registry = IdentityProviderRegistry(providers)
    logger.info("oauth_providers_registered", providers=registry.supported_providers())
    return registry
