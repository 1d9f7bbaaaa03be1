"""Forgot-password and reset-token endpoints.

``POST /forgot-password`` answers 404 for an unknown email, the same way
registration answers 409 for a known one. Both reveal whether an account
exists.
"""

from fastapi import APIRouter, Request, Response, status

from warden.adapters.api.v1.auth.schemas import (
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
    TokenResponse,
)
from warden.infrastructure.dependency_injection.auth_dependencies import ResetTokenServiceDep
from warden.utils.i18n import get_request_language, get_translated_message

router = APIRouter()


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Send a password reset email",
)
async def forgot_password(
    request: Request, payload: ForgotPasswordRequest, service: ResetTokenServiceDep
) -> MessageResponse:
    await service.request_reset(payload.email)
    return MessageResponse(
        message=get_translated_message("password_reset_email_sent", get_request_language(request))
    )


@router.get(
    "/password-reset/{token}",
    response_model=TokenResponse,
    summary="Sign in with a password reset token",
)
async def login_with_reset_token(token: str, service: ResetTokenServiceDep) -> TokenResponse:
    """Exchange a live reset token for a session token.

    The reset token is not consumed and can be used again until it expires.
    """
    return TokenResponse(access_token=await service.login_with_token(token))


@router.post(
    "/password-reset/{token}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Set a new password with a reset token",
)
async def reset_password(
    token: str, payload: ResetPasswordRequest, service: ResetTokenServiceDep
) -> Response:
    await service.reset_password(token, payload.new_password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
