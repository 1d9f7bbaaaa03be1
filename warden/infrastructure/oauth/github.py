from typing import Any, Dict, List, Optional

from warden.core.exceptions import NoEmailAvailableError, ProviderUserInfoError
from warden.domain.value_objects.identity_profile import IdentityProfile, ProviderToken
from warden.infrastructure.oauth.base import OAuth2IdentityProvider


def select_email(emails: List[Any]) -> Optional[Dict[str, Any]]:
    """Pick the primary verified entry, else the first one listed.

    Entries that are not objects or carry no address are ignored.
    """
    entries = [entry for entry in emails if isinstance(entry, dict) and entry.get("email")]
    for entry in entries:
        if entry.get("primary") and entry.get("verified"):
            return entry
    return entries[0] if entries else None


class GitHubIdentityProvider(OAuth2IdentityProvider):
    """GitHub sign-in.

    The profile endpoint omits private emails, so the email list is fetched
    separately. An account with no email at all cannot be signed in.
    """

    NAME = "github"
    AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
    TOKEN_URL = "https://github.com/login/oauth/access_token"
    EMAILS_URL = "https://api.github.com/user/emails"
    USER_URL = "https://api.github.com/user"
    SCOPE = "user:email"

    async def get_user_info(self, token: ProviderToken) -> IdentityProfile:
        async with self._client() as client:
            emails = await self._get_json(client, self.EMAILS_URL, token)
            if not isinstance(emails, list):
                raise ProviderUserInfoError()
            selected = select_email(emails)
            if selected is None:
                raise NoEmailAvailableError()
            user = await self._get_json(client, self.USER_URL, token)

        if not isinstance(user, dict) or user.get("id") is None:
            raise ProviderUserInfoError()
        return IdentityProfile(
            provider=self.NAME,
            subject=str(user["id"]),
            email=selected["email"],
            name=user.get("name") or "",
            avatar_url=user.get("avatar_url") or "",
            username=user.get("login"),
            email_verified=bool(selected.get("verified")),
        )
