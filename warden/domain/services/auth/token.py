"""Stateless session-token authority.

Session tokens are compact JWS strings signed with a symmetric HMAC secret.
Nothing is stored server-side: a token stays valid until it expires, and there
is no revocation list, so logging out only discards the token on the client.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, ClassVar, Mapping

from jwt import PyJWTError
from jwt import decode as jwt_decode
from jwt import encode as jwt_encode
from structlog import get_logger

from warden.core.config.settings import Settings
from warden.core.exceptions import InvalidTokenError, TokenExpiredError
from warden.domain.value_objects.session_claims import SessionClaims
from warden.utils.time import utcnow

logger = get_logger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class TokenAuthorityConfig:
    """Immutable signing configuration.

    Attributes:
        secret: Symmetric signing key.
        ttl: Lifetime of issued tokens.
        issuer: Value of the ``iss`` claim; tokens from another issuer are rejected.
        algorithm: HMAC algorithm used to sign and the only one accepted on verify.
    """

    secret: str
    ttl: timedelta
    issuer: str = "auth-service"
    algorithm: str = "HS256"

    ALLOWED_ALGORITHMS: ClassVar[frozenset] = frozenset({"HS256", "HS384", "HS512"})

    def __post_init__(self) -> None:
        if not self.secret:
            raise ValueError("Token signing secret must not be empty")
        if self.algorithm not in self.ALLOWED_ALGORITHMS:
            raise ValueError(f"Unsupported token algorithm {self.algorithm!r}; HMAC required")
        if self.ttl <= timedelta(0):
            raise ValueError("Token TTL must be positive")

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenAuthorityConfig":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            ttl=timedelta(minutes=settings.JWT_EXPIRATION_MINUTES),
            issuer=settings.JWT_ISSUER,
            algorithm=settings.JWT_ALGORITHM,
        )

    def __repr__(self) -> str:
        return f"TokenAuthorityConfig(ttl={self.ttl!r}, issuer={self.issuer!r}, algorithm={self.algorithm!r})"


class TokenAuthority:
    """Mints and verifies session tokens.

    The authority holds only its immutable configuration and a clock, so one
    instance can be shared by any number of concurrent requests.

    Claims:
        sub: user identifier
        email: user email at issue time
        iat / nbf: issue time
        exp: ``iat + ttl``
        iss: configured issuer

    Verification failures come in two kinds. ``TokenExpiredError`` is raised
    only for a well-formed, correctly signed token whose ``exp`` has passed.
    Everything else (bad signature, foreign algorithm, missing or malformed
    claims, wrong issuer, not yet valid) raises ``InvalidTokenError``.
    """

    REQUIRED_CLAIMS: ClassVar[tuple] = ("sub", "email", "iat", "nbf", "exp", "iss")

    def __init__(self, config: TokenAuthorityConfig, clock: Clock = utcnow):
        self._config = config
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._config.ttl

    def issue(self, user_id: str, email: str) -> str:
        """Sign a new session token for ``user_id``.

        Args:
            user_id: Identifier placed in the ``sub`` claim.
            email: Email placed in the ``email`` claim.

        Returns:
            str: The encoded token.
        """
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "email": email,
            "iat": now,
            "nbf": now,
            "exp": now + self._config.ttl,
            "iss": self._config.issuer,
        }
        token = jwt_encode(payload, self._config.secret, algorithm=self._config.algorithm)
        logger.debug("session_token_issued", user_id=str(user_id))
        return token

    def verify(self, token: str) -> SessionClaims:
        """Verify ``token`` and return its claims.

        Raises:
            TokenExpiredError: The token is authentic but past its expiry.
            InvalidTokenError: The token is not authentic or not usable.
        """
        try:
            payload = jwt_decode(
                token,
                self._config.secret,
                algorithms=[self._config.algorithm],
                issuer=self._config.issuer,
                options={
                    "require": list(self.REQUIRED_CLAIMS),
                    "verify_exp": False,
                    "verify_nbf": False,
                    "verify_iat": False,
                },
            )
        except PyJWTError as exc:
            logger.info("session_token_rejected", reason=type(exc).__name__)
            raise InvalidTokenError() from exc

        claims = self._claims_from_payload(payload)
        now = self._clock()
        if now < claims.not_before:
            logger.info("session_token_rejected", reason="not_yet_valid")
            raise InvalidTokenError()
        if now > claims.expires_at:
            logger.info("session_token_expired", user_id=claims.user_id)
            raise TokenExpiredError()
        return claims

    @staticmethod
    def _claims_from_payload(payload: Mapping[str, Any]) -> SessionClaims:
        user_id, email = payload["sub"], payload["email"]
        if not isinstance(user_id, str) or not user_id or not isinstance(email, str):
            logger.info("session_token_rejected", reason="malformed_identity_claims")
            raise InvalidTokenError()
        timestamps = {}
        for name in ("iat", "nbf", "exp"):
            value = payload[name]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                logger.info("session_token_rejected", reason=f"malformed_{name}")
                raise InvalidTokenError()
            try:
                timestamps[name] = datetime.fromtimestamp(value, tz=timezone.utc)
            except (OverflowError, OSError, ValueError) as exc:
                raise InvalidTokenError() from exc
        return SessionClaims(
            user_id=user_id,
            email=email,
            issued_at=timestamps["iat"],
            not_before=timestamps["nbf"],
            expires_at=timestamps["exp"],
            issuer=payload["iss"],
        )
