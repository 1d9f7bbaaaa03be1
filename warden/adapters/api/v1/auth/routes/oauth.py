"""OAuth login endpoints.

The ``state`` returned by ``/authorize`` must be stored by the client (for
example in a cookie) and compared with the ``state`` the provider sends back
before calling ``/callback``. This service does not keep it.
"""

from typing import Optional

from fastapi import APIRouter, Query

from warden.adapters.api.v1.auth.schemas import (
    AuthorizationUrlResponse,
    IdentityProfileOut,
    OAuthLoginResponse,
    ProvidersResponse,
)
from warden.infrastructure.dependency_injection.auth_dependencies import (
    OAuthLoginServiceDep,
    RegistryDep,
)

router = APIRouter()


@router.get("/providers", response_model=ProvidersResponse, summary="Configured identity providers")
async def list_providers(registry: RegistryDep) -> ProvidersResponse:
    return ProvidersResponse(providers=registry.supported_providers())


@router.get(
    "/{provider}/authorize",
    response_model=AuthorizationUrlResponse,
    summary="Start an OAuth login",
)
async def authorize(
    provider: str,
    registry: RegistryDep,
    state: Optional[str] = Query(default=None, max_length=512),
) -> AuthorizationUrlResponse:
    redirect = registry.get_auth_url(provider, state)
    return AuthorizationUrlResponse(authorization_url=redirect.url, state=redirect.state)


@router.get(
    "/{provider}/callback",
    response_model=OAuthLoginResponse,
    summary="Complete an OAuth login",
)
async def callback(
    provider: str,
    service: OAuthLoginServiceDep,
    code: str = Query(..., min_length=1),
) -> OAuthLoginResponse:
    result = await service.handle_callback(provider, code)
    return OAuthLoginResponse(
        access_token=result.access_token,
        profile=IdentityProfileOut.model_validate(result.profile),
    )
