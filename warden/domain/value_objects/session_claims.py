from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class SessionClaims:
    """Decoded payload of a session token.

    Immutable: issuing a new token produces a new value.

    Attributes:
        user_id: Identifier of the authenticated user (``sub`` claim).
        email: Email of the user when the token was issued.
        issued_at: ``iat`` claim.
        not_before: ``nbf`` claim.
        expires_at: ``exp`` claim.
        issuer: ``iss`` claim.
    """

    user_id: str
    email: str
    issued_at: datetime
    not_before: datetime
    expires_at: datetime
    issuer: str


@dataclass(frozen=True, slots=True)
class AuthenticatedIdentity:
    """The caller of a protected operation, resolved from a bearer token.

    Passed explicitly into every protected route instead of being looked up
    from ambient request state.
    """

    user_id: str
    email: str
    claims: SessionClaims
