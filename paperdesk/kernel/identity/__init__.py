"""
Identity Core - users, sign-in flows and tokens.
"""

from paperdesk.kernel.identity.auth_service import (
    AuthService,
    CreateAccessTokenInput,
    GithubCodeInput,
    GoogleAccessTokenInput,
    GoogleCodeInput,
    RefreshTokenInput,
)
from paperdesk.kernel.identity.identity_service import IdentityService
from paperdesk.kernel.identity.jwt import (
    AccessTokenPayload,
    JWTManager,
    ResourceToken,
    ResourceTokenPayload,
    TokenConfig,
    TokenKind,
    TokenPair,
    extract_bearer_token,
)
from paperdesk.kernel.identity.providers import GithubProvider, GoogleProvider, IdentityProvider

__all__ = [
    "AuthService",
    "CreateAccessTokenInput",
    "GithubCodeInput",
    "GoogleAccessTokenInput",
    "GoogleCodeInput",
    "RefreshTokenInput",
    "IdentityService",
    "AccessTokenPayload",
    "JWTManager",
    "ResourceToken",
    "ResourceTokenPayload",
    "TokenConfig",
    "TokenKind",
    "TokenPair",
    "extract_bearer_token",
    "GithubProvider",
    "GoogleProvider",
    "IdentityProvider",
]
