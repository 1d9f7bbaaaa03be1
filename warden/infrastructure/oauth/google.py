from warden.core.exceptions import ProviderUserInfoError
from warden.domain.value_objects.identity_profile import IdentityProfile, ProviderToken
from warden.infrastructure.oauth.base import OAuth2IdentityProvider


class GoogleIdentityProvider(OAuth2IdentityProvider):
    """Google sign-in. One userinfo call returns id, email, name and picture."""

    NAME = "google"
    AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
    SCOPE = (
        "https://www.googleapis.com/auth/userinfo.email "
        "https://www.googleapis.com/auth/userinfo.profile"
    )

    async def get_user_info(self, token: ProviderToken) -> IdentityProfile:
        async with self._client() as client:
            data = await self._get_json(client, self.USERINFO_URL, token)

        if not isinstance(data, dict) or not data.get("id"):
            raise ProviderUserInfoError()
        return IdentityProfile(
            provider=self.NAME,
            subject=str(data["id"]),
            email=data.get("email") or None,
            name=data.get("name") or "",
            avatar_url=data.get("picture") or "",
            email_verified=data.get("verified_email") is True,
        )
