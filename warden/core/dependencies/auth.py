from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from warden.core.exceptions import InvalidTokenError
from warden.domain.value_objects.session_claims import AuthenticatedIdentity
from warden.infrastructure.dependency_injection.auth_dependencies import CredentialServiceDep

__all__ = ["get_current_identity", "CurrentIdentity"]

_bearer = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(_bearer)],
    service: CredentialServiceDep,
) -> AuthenticatedIdentity:
    """Resolve the ``Authorization: Bearer`` header into an authenticated identity.

    The token is verified and its user re-resolved, so a deleted account is
    rejected even while its token has not expired.

    Raises:
        InvalidTokenError: If the header is missing or not a bearer token.
        TokenExpiredError: If the token has expired.
        UserNotFoundError: If the token's user no longer exists.
    """
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise InvalidTokenError(code="missing_bearer_token")

    return await service.authenticate(credentials.credentials)


CurrentIdentity = Annotated[AuthenticatedIdentity, Depends(get_current_identity)]
