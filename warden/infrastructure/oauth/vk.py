from typing import Dict, Optional

from warden.core.exceptions import ProviderUserInfoError
from warden.domain.value_objects.identity_profile import IdentityProfile, ProviderToken
from warden.infrastructure.oauth.base import ClientFactory, OAuth2IdentityProvider


class VKIdentityProvider(OAuth2IdentityProvider):
    """VK sign-in.

    VK returns ``email`` and ``user_id`` inline on the token response, and
    every API call (including the authorization URL) must carry the API
    version ``v``. VK only hands out confirmed addresses, so an email on the
    token response counts as verified.
    """

    NAME = "vk"
    AUTHORIZE_URL = "https://oauth.vk.com/authorize"
    TOKEN_URL = "https://oauth.vk.com/access_token"
    USERS_GET_URL = "https://api.vk.com/method/users.get"
    SCOPE = "email"
    DEFAULT_API_VERSION = "5.199"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        api_version: Optional[str] = None,
        timeout: float = 10.0,
        client_factory: Optional[ClientFactory] = None,
    ):
        super().__init__(client_id, client_secret, redirect_uri, timeout, client_factory)
        self.api_version = api_version or self.DEFAULT_API_VERSION

    def authorization_params(self) -> Dict[str, str]:
        return {"display": "page", "v": self.api_version}

    async def get_user_info(self, token: ProviderToken) -> IdentityProfile:
        user_id = token.extras.get("user_id")
        if user_id is None:
            raise ProviderUserInfoError()
        params = {
            "user_ids": str(user_id),
            "fields": "photo_200,first_name,last_name",
            "access_token": token.access_token,
            "v": self.api_version,
        }
        async with self._client() as client:
            data = await self._get_json(client, self.USERS_GET_URL, token, params=params, bearer=False)

        users = data.get("response") if isinstance(data, dict) else None
        if not isinstance(users, list) or not users or not isinstance(users[0], dict):
            raise ProviderUserInfoError()
        user = users[0]
        email = token.extras.get("email") or None
        name = " ".join(part for part in (user.get("first_name"), user.get("last_name")) if part)
        return IdentityProfile(
            provider=self.NAME,
            subject=str(user.get("id", user_id)),
            email=email,
            name=name,
            avatar_url=user.get("photo_200") or "",
            username=str(user.get("id", user_id)),
            email_verified=email is not None,
        )
