"""
Authentication schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field

from paperdesk.errors import InvalidInputError
from paperdesk.kernel.identity.auth_service import (
    CreateAccessTokenInput,
    GithubCodeInput,
    GoogleAccessTokenInput,
    GoogleCodeInput,
    RefreshTokenInput,
)


class GithubCodeRequest(BaseModel):
    client_id: str
    code: str


class GoogleCodeRequest(BaseModel):
    client_id: str
    code: str


class GoogleAccessTokenRequest(BaseModel):
    access_token: str


class RefreshTokenRequest(BaseModel):
    """Token refresh request."""

    refresh_token: str


class CreateAccessTokenRequest(BaseModel):
    """Access token request. Exactly one sign-in flow must be set."""

    github: Optional[GithubCodeRequest] = None
    google: Optional[GoogleCodeRequest] = None
    google_access_token: Optional[GoogleAccessTokenRequest] = None
    refresh_token: Optional[RefreshTokenRequest] = None

    def to_input(self) -> CreateAccessTokenInput:
        """
        Raises:
            InvalidInputError: unless exactly one member is set
        """
        members = [
            m for m in (self.github, self.google, self.google_access_token, self.refresh_token)
            if m is not None
        ]
        if len(members) != 1:
            raise InvalidInputError("Invalid CreateAccessTokenInput")

        if self.github is not None:
            return GithubCodeInput(client_id=self.github.client_id, code=self.github.code)
        if self.google is not None:
            return GoogleCodeInput(client_id=self.google.client_id, code=self.google.code)
        if self.google_access_token is not None:
            return GoogleAccessTokenInput(access_token=self.google_access_token.access_token)
        return RefreshTokenInput(refresh_token=self.refresh_token.refresh_token)


class AccessTokenResponse(BaseModel):
    """Authentication token response."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(..., description="Seconds until the access token expires")
