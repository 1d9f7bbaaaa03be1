"""Registration endpoint."""

from fastapi import APIRouter, status

from warden.adapters.api.v1.auth.schemas import RegisterRequest, RegisterResponse, UserOut
from warden.infrastructure.dependency_injection.auth_dependencies import CredentialServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
async def register_user(payload: RegisterRequest, service: CredentialServiceDep) -> RegisterResponse:
    """Create an account and sign it in.

    Registration itself issues no token; the route signs the new user in with
    a separate call so clients get a session in one round trip.
    """
    user = await service.register(payload.email, payload.password, payload.name)
    access_token = await service.login_by_id(user.id)
    return RegisterResponse(access_token=access_token, user=UserOut.model_validate(user))
