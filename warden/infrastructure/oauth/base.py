"""Shared OAuth2 authorization-code plumbing for identity provider adapters.

Each adapter declares its endpoints and scope as class attributes and only
implements ``get_user_info``. Token exchange and profile requests go through
authlib's ``AsyncOAuth2Client`` (httpx underneath), so they honour the
configured timeout and abort cleanly when the calling task is cancelled.
"""

from typing import Any, Callable, ClassVar, Dict, Mapping, Optional

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.httpx_client import AsyncOAuth2Client
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri
from structlog import get_logger

from warden.core.exceptions import ExchangeFailedError, ProviderUserInfoError
from warden.domain.interfaces.identity_provider import IIdentityProvider
from warden.domain.value_objects.identity_profile import ProviderToken

logger = get_logger(__name__)

ClientFactory = Callable[..., AsyncOAuth2Client]


class OAuth2IdentityProvider(IIdentityProvider):
    """Authorization-code flow against one provider.

    Attributes:
        client_id: OAuth client id.
        client_secret: OAuth client secret.
        redirect_uri: Callback URL registered with the provider.
        timeout: Per-request timeout in seconds.
    """

    NAME: ClassVar[str]
    AUTHORIZE_URL: ClassVar[str]
    TOKEN_URL: ClassVar[str]
    SCOPE: ClassVar[str]
    TOKEN_ENDPOINT_AUTH_METHOD: ClassVar[str] = "client_secret_post"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 10.0,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout
        self._client_factory = client_factory or AsyncOAuth2Client

    @property
    def name(self) -> str:
        return self.NAME

    def authorization_params(self) -> Dict[str, str]:
        """Extra query parameters the provider requires on the authorization URL."""
        return {}

    def get_auth_url(self, state: str) -> str:
        return prepare_grant_uri(
            self.AUTHORIZE_URL,
            client_id=self.client_id,
            response_type="code",
            redirect_uri=self.redirect_uri,
            scope=self.SCOPE,
            state=state,
            **self.authorization_params(),
        )

    def _client(self) -> AsyncOAuth2Client:
        return self._client_factory(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=self.SCOPE,
            redirect_uri=self.redirect_uri,
            token_endpoint_auth_method=self.TOKEN_ENDPOINT_AUTH_METHOD,
            timeout=self.timeout,
        )

    async def exchange(self, code: str) -> ProviderToken:
        try:
            async with self._client() as client:
                token = await client.fetch_token(
                    self.TOKEN_URL, code=code, grant_type="authorization_code"
                )
        except (httpx.HTTPError, AuthlibBaseError, ValueError) as exc:
            logger.warning("oauth_exchange_failed", provider=self.NAME, error=repr(exc))
            raise ExchangeFailedError() from exc

        access_token = token.get("access_token") if isinstance(token, Mapping) else None
        if not access_token:
            logger.warning("oauth_exchange_failed", provider=self.NAME, error="missing access_token")
            raise ExchangeFailedError()

        extras = {k: v for k, v in token.items() if k not in ("access_token", "token_type")}
        logger.info("oauth_code_exchanged", provider=self.NAME)
        return ProviderToken(
            access_token=access_token,
            token_type=str(token.get("token_type") or "bearer"),
            extras=extras,
        )

    async def _get_json(
        self,
        client: AsyncOAuth2Client,
        url: str,
        token: ProviderToken,
        params: Optional[Mapping[str, Any]] = None,
        bearer: bool = True,
    ) -> Any:
        """GET ``url`` and decode the JSON body.

        The token is attached by hand rather than through authlib's token
        management, because some providers report ``expires_in=0`` for
        non-expiring tokens, which authlib treats as already expired.
        """
        headers = {"Accept": "application/json"}
        if bearer:
            headers["Authorization"] = f"Bearer {token.access_token}"
        try:
            response = await client.request(
                "GET", url, params=params, headers=headers, withhold_token=True
            )
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("oauth_user_info_failed", provider=self.NAME, url=url, error=repr(exc))
            raise ProviderUserInfoError() from exc
