"""Email/password login endpoint."""

from fastapi import APIRouter

from warden.adapters.api.v1.auth.schemas import LoginRequest, TokenResponse
from warden.infrastructure.dependency_injection.auth_dependencies import CredentialServiceDep

router = APIRouter()


@router.post("", response_model=TokenResponse, summary="Authenticate with email and password")
async def login_user(payload: LoginRequest, service: CredentialServiceDep) -> TokenResponse:
    return TokenResponse(access_token=await service.login(payload.email, payload.password))
