"""The capability set every external identity provider implements.

Adding a provider means implementing this interface and listing the class in
the provider registry; nothing else branches on provider identity.
"""

from abc import ABC, abstractmethod

from warden.domain.value_objects.identity_profile import IdentityProfile, ProviderToken


class IIdentityProvider(ABC):
    """A single OAuth2 identity provider."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key, e.g. ``"github"``."""
        raise NotImplementedError

    @abstractmethod
    def get_auth_url(self, state: str) -> str:
        """Builds the provider authorization URL carrying ``state``."""
        raise NotImplementedError

    @abstractmethod
    async def exchange(self, code: str) -> ProviderToken:
        """Trades an authorization code for a provider access token.

        Raises:
            ExchangeFailedError: On any transport or provider-side failure;
                the original error is chained as ``__cause__``.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_user_info(self, token: ProviderToken) -> IdentityProfile:
        """Loads and normalizes the user's provider profile.

        Raises:
            ProviderUserInfoError: If the provider call fails or returns an
                unusable payload.
            NoEmailAvailableError: If the provider has no email for the user
                where one is required to build the profile.
        """
        raise NotImplementedError
