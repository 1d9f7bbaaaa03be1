from .login import OAuthLoginResult, OAuthLoginService
from .registry import IdentityProviderRegistry

__all__ = ["IdentityProviderRegistry", "OAuthLoginResult", "OAuthLoginService"]
