"""Endpoints acting on the authenticated caller's own account."""

from fastapi import APIRouter, Response, status

from warden.adapters.api.v1.auth.schemas import ChangeEmailRequest, ChangePasswordRequest, UserOut
from warden.core.dependencies.auth import CurrentIdentity
from warden.infrastructure.dependency_injection.auth_dependencies import CredentialServiceDep

router = APIRouter()


@router.get("", response_model=UserOut, summary="Current user's profile")
async def get_profile(identity: CurrentIdentity, service: CredentialServiceDep) -> UserOut:
    return UserOut.model_validate(await service.get_profile(identity.user_id))


@router.put(
    "/password",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Change password",
)
async def change_password(
    payload: ChangePasswordRequest, identity: CurrentIdentity, service: CredentialServiceDep
) -> Response:
    """Replace the caller's password after checking the current one.

    Tokens issued before the change stay valid until they expire.
    """
    await service.update_password(identity.user_id, payload.old_password, payload.new_password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/email", response_model=UserOut, summary="Change email address")
async def change_email(
    payload: ChangeEmailRequest, identity: CurrentIdentity, service: CredentialServiceDep
) -> UserOut:
    return UserOut.model_validate(await service.update_email(identity.user_id, payload.email))
