"""Centralized, structured exception hierarchy for Warden.

Every exception carries a machine-readable ``code`` and a human-readable
``message``. The code doubles as the i18n message key, so the HTTP layer can
re-render the message in the caller's language. When no message is given the
default-language translation of the code is used.

The hierarchy follows the error kinds of the authentication core:

- ``ValidationError``: malformed input (weak password, bad email).
- ``ConflictError``: a uniqueness rule was violated.
- ``AuthenticationError``: bad credentials or an invalid/expired token.
- ``NotFoundError``: a user, reset token or identity provider is unknown.
- ``UpstreamError``: an identity provider failed or misbehaved.

Unexpected storage failures are not wrapped; they propagate and become a
generic 500.
"""

from __future__ import annotations

from typing import Final, Optional

from warden.utils.i18n import get_translated_message

__all__: Final = [
    "WardenError",
    "ValidationError",
    "WeakPasswordError",
    "InvalidEmailError",
    "ConflictError",
    "EmailExistsError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "TokenExpiredError",
    "ResetTokenExpiredError",
    "NoEmailAvailableError",
    "NotFoundError",
    "UserNotFoundError",
    "ResetTokenNotFoundError",
    "ProviderNotFoundError",
    "UpstreamError",
    "ExchangeFailedError",
    "ProviderUserInfoError",
]


class WardenError(Exception):
    """Base exception class for all custom errors in the Warden application.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code. It is also the
            translation key used by the HTTP exception handlers.
        params (dict): Values interpolated into the translated message.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None, **params: str):
        self.code = code or type(self).code
        self.params = params
        self.message = message or get_translated_message(self.code).format(**params)
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Validation errors (422 Unprocessable Entity)
# ---------------------------------------------------------------------------


class ValidationError(WardenError):
    """Raised for general input validation failures."""

    code = "validation_error"


class WeakPasswordError(ValidationError):
    """Raised when a password does not meet the minimum strength rule."""

    code = "weak_password"


class InvalidEmailError(ValidationError):
    """Raised when an email address is syntactically invalid."""

    code = "invalid_email"


# ---------------------------------------------------------------------------
# Conflicts (409 Conflict)
# ---------------------------------------------------------------------------


class ConflictError(WardenError):
    code = "conflict"


class EmailExistsError(ConflictError):
    """Raised when an email address is already registered.

    Registration deliberately reveals this, so the message is specific.
    """

    code = "email_exists"


# ---------------------------------------------------------------------------
# Authentication errors (401 Unauthorized)
# ---------------------------------------------------------------------------


class AuthenticationError(WardenError):
    """Raised for general authentication failures.

    This exception is the base for more specific authentication-related
    errors. It maps to a `401 Unauthorized` HTTP status code.
    """

    code = "authentication_error"


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not authenticate.

    The same error is used whether the account is missing or the password is
    wrong, so callers cannot enumerate accounts.
    """

    code = "invalid_credentials"


class InvalidTokenError(AuthenticationError):
    """Raised for a session token that is malformed, forged, or otherwise unusable."""

    code = "invalid_token"


class TokenExpiredError(AuthenticationError):
    """Raised for a correctly signed session token whose expiry has passed."""

    code = "token_expired"


class ResetTokenExpiredError(AuthenticationError):
    code = "reset_token_expired"


class NoEmailAvailableError(AuthenticationError):
    """Raised when an identity provider returns no usable email address."""

    code = "no_email_available"


# ---------------------------------------------------------------------------
# Lookups (404 Not Found)
# ---------------------------------------------------------------------------


class NotFoundError(WardenError):
    code = "not_found"


class UserNotFoundError(NotFoundError):
    code = "user_not_found"


class ResetTokenNotFoundError(NotFoundError):
    code = "reset_token_not_found"


class ProviderNotFoundError(NotFoundError):
    """Raised when an identity provider is unknown or not configured."""

    code = "provider_not_found"

    def __init__(self, provider: str, message: Optional[str] = None):
        self.provider = provider
        super().__init__(message, provider=provider)


# ---------------------------------------------------------------------------
# Identity provider failures (502 Bad Gateway)
# ---------------------------------------------------------------------------


class UpstreamError(WardenError):
    code = "upstream_error"


class ExchangeFailedError(UpstreamError):
    """Raised when an authorization code cannot be traded for a provider token.

    The underlying transport or provider error is chained as ``__cause__``.
    """

    code = "oauth_exchange_failed"


class ProviderUserInfoError(UpstreamError):
    code = "oauth_user_info_failed"
