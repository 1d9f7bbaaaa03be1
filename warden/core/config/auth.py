"""Authentication settings: session tokens, password hashing, reset tokens and OAuth providers.
"""

import logging

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class AuthSettings(BaseSettings):
    """Defines settings for session tokens, password hashing and OAuth providers.

    Security Note:
        - JWT_SECRET signs every session token; anyone holding it can mint tokens
          for any user. Store it in a secret manager and rotate it regularly
          (OWASP A02:2021 - Cryptographic Failures).
        - OAuth client secrets should never be exposed in logs or version control.
        - A provider is only enabled when both its client id and secret are set.
    """

    # Session tokens
    JWT_SECRET: SecretStr = SecretStr("")
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "auth-service"
    JWT_EXPIRATION_MINUTES: int = Field(ge=1, default=60)

    # Password hashing
    BCRYPT_WORK_FACTOR: int = Field(ge=4, le=31, default=12)
    PASSWORD_HASHING_CONCURRENCY: int = Field(ge=1, default=4)

    # Password reset tokens
    PASSWORD_RESET_TOKEN_EXPIRATION_MINUTES: int = Field(ge=1, default=30)
    PASSWORD_RESET_SWEEP_AFTER_MINUTES: int = Field(ge=1, default=24 * 60)

    # OAuth providers
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: SecretStr = SecretStr("")
    GITHUB_CLIENT_ID: str = ""
    GITHUB_CLIENT_SECRET: SecretStr = SecretStr("")
    VK_CLIENT_ID: str = ""
    VK_CLIENT_SECRET: SecretStr = SecretStr("")
    VK_API_VERSION: str = "5.199"
    OAUTH_REDIRECT_URL: str = "http://localhost:8000/api/v1/auth/oauth/{provider}/callback"
    OAUTH_HTTP_TIMEOUT_SECONDS: float = Field(gt=0, default=10.0)

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def _require_hmac_algorithm(cls, v: str) -> str:
        """Only symmetric HMAC algorithms are accepted for session tokens."""
        if v not in ("HS256", "HS384", "HS512"):
            logger.error("Unsupported JWT algorithm configured: %s", v)
            raise ValueError(f"JWT_ALGORITHM must be an HMAC algorithm, got {v!r}")
        return v

    def oauth_redirect_url(self, provider: str) -> str:
        """Render the callback URL for ``provider`` from the configured template."""
        return self.OAUTH_REDIRECT_URL.format(provider=provider)
