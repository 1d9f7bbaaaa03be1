from __future__ import annotations

"""Authentication router package: registration, login, profile, password reset and OAuth."""

from fastapi import APIRouter

from .routes import account as account_route
from .routes import login as login_route
from .routes import oauth as oauth_route
from .routes import password_reset as password_reset_route
from .routes import register as register_route

router = APIRouter(prefix="/auth", tags=["auth"])

router.include_router(register_route.router, prefix="/register")
router.include_router(login_route.router, prefix="/login")
router.include_router(account_route.router, prefix="/me")
router.include_router(password_reset_route.router)
router.include_router(oauth_route.router, prefix="/oauth")

__all__ = ["router"]
