"""
Pydantic schemas for transport request/response shapes.
"""

from paperdesk.schemas.auth import (
    AccessTokenResponse,
    CreateAccessTokenRequest,
    GithubCodeRequest,
    GoogleAccessTokenRequest,
    GoogleCodeRequest,
    RefreshTokenRequest,
)
from paperdesk.schemas.common import (
    Connection,
    Edge,
    ErrorResponse,
    PageInfo,
    paper_connection,
)

__all__ = [
    "AccessTokenResponse",
    "CreateAccessTokenRequest",
    "GithubCodeRequest",
    "GoogleAccessTokenRequest",
    "GoogleCodeRequest",
    "RefreshTokenRequest",
    "Connection",
    "Edge",
    "ErrorResponse",
    "PageInfo",
    "paper_connection",
]
