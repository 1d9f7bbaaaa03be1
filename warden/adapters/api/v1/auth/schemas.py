from __future__ import annotations

"""Request and response models for the authentication endpoints.

Emails are accepted as plain strings so that address validation happens in
the domain layer and fails with the same ``invalid_email`` error everywhere.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Payload expected by ``POST /auth/register``."""

    email: str = Field(..., examples=["alice@example.com"])
    password: str = Field(..., examples=["password123"])
    name: Optional[str] = Field(default=None, max_length=255, examples=["Alice"])


class LoginRequest(BaseModel):
    """Payload expected by ``POST /auth/login``."""

    email: str = Field(..., examples=["alice@example.com"])
    password: str


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., examples=["alice@example.com"])


class ResetPasswordRequest(BaseModel):
    new_password: str


class ChangePasswordRequest(BaseModel):
    """Payload expected by ``PUT /auth/me/password``."""

    old_password: str
    new_password: str


class ChangeEmailRequest(BaseModel):
    email: str


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class UserOut(BaseModel):
    """Public view of a user. The password hash is never part of it."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class RegisterResponse(TokenResponse):
    user: UserOut


class MessageResponse(BaseModel):
    message: str


class IdentityProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    provider: str
    subject: str
    email: Optional[str] = None
    name: str = ""
    avatar_url: str = ""
    username: Optional[str] = None
    email_verified: bool = False


class OAuthLoginResponse(TokenResponse):
    profile: IdentityProfileOut


class AuthorizationUrlResponse(BaseModel):
    authorization_url: str
    state: str


class ProvidersResponse(BaseModel):
    providers: List[str]
