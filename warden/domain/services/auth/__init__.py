from .credentials import CredentialService
from .reset_tokens import ResetTokenService
from .token import TokenAuthority, TokenAuthorityConfig

__all__ = [
    "CredentialService",
    "ResetTokenService",
    "TokenAuthority",
    "TokenAuthorityConfig",
]
