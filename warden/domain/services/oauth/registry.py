"""Lookup table of configured identity providers.

The registry is built once at startup and only read afterwards, so it is
shared across requests without locking.
"""

import secrets
from types import MappingProxyType
from typing import Iterable, List, Optional

from structlog import get_logger

from warden.core.exceptions import ProviderNotFoundError
from warden.domain.interfaces.identity_provider import IIdentityProvider
from warden.domain.value_objects.identity_profile import (
    AuthorizationRedirect,
    IdentityProfile,
    ProviderToken,
)

logger = get_logger(__name__)

STATE_BYTES = 32


class IdentityProviderRegistry:
    """Selects an identity provider by name and forwards the exchange protocol to it.

    The ``state`` handed out by ``get_auth_url`` is opaque here. Checking it
    on the callback (e.g. against the user's session) is the caller's job.
    """

    def __init__(self, providers: Iterable[IIdentityProvider] = ()):
        self._providers = MappingProxyType({provider.name: provider for provider in providers})

    def get(self, name: str) -> IIdentityProvider:
        """
        Raises:
            ProviderNotFoundError: If ``name`` is not configured.
        """
        provider = self._providers.get(name)
        if provider is None:
            logger.info("oauth_provider_not_found", provider=name)
            raise ProviderNotFoundError(name)
        return provider

    def supported_providers(self) -> List[str]:
        return sorted(self._providers)

    def get_auth_url(self, name: str, state: Optional[str] = None) -> AuthorizationRedirect:
        """Build the authorization URL, generating a random ``state`` if none is given."""
        provider = self.get(name)
        if not state:
            state = secrets.token_urlsafe(STATE_BYTES)
        return AuthorizationRedirect(url=provider.get_auth_url(state), state=state)

    async def exchange(self, name: str, code: str) -> ProviderToken:
        return await self.get(name).exchange(code)

    async def get_user_info(self, name: str, token: ProviderToken) -> IdentityProfile:
        return await self.get(name).get_user_info(token)
