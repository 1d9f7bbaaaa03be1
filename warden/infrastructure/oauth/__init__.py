from .factory import build_identity_provider_registry
from .github import GitHubIdentityProvider
from .google import GoogleIdentityProvider
from .vk import VKIdentityProvider

__all__ = [
    "GitHubIdentityProvider",
    "GoogleIdentityProvider",
    "VKIdentityProvider",
    "build_identity_provider_registry",
]
