"""Value objects exchanged with external identity providers."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from warden.core.logging import mask_email


@dataclass(frozen=True, slots=True)
class IdentityProfile:
    """A provider profile normalized to one shape.

    Built per OAuth callback, mapped onto a local user and then discarded.

    Attributes:
        provider: Registry key of the provider that produced the profile.
        subject: Provider-assigned user id, always as a string.
        email: Email address, if the provider returned one.
        name: Display name; may be empty.
        avatar_url: Profile picture URL; may be empty.
        username: Provider login handle, where the provider has one.
        email_verified: Whether the provider vouches that the user controls
            ``email``. Only a verified email may sign into an existing account.
    """

    provider: str
    subject: str
    email: Optional[str] = None
    name: str = ""
    avatar_url: str = ""
    username: Optional[str] = None
    email_verified: bool = False

    def mask_for_logging(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "subject": self.subject,
            "email": mask_email(self.email),
            "email_verified": self.email_verified,
        }


@dataclass(frozen=True, slots=True)
class ProviderToken:
    """Access token returned by a provider's token endpoint.

    ``extras`` keeps every other field of the token response; some providers
    put identity data there (VK returns ``email`` and ``user_id``).
    """

    access_token: str
    token_type: str = "bearer"
    extras: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"ProviderToken(token_type={self.token_type!r}, extras={sorted(self.extras)})"


@dataclass(frozen=True, slots=True)
class AuthorizationRedirect:
    """Where to send the user to start an OAuth login, and the state to correlate on return."""

    url: str
    state: str
