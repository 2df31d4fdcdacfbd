"""
Token creation from the supported sign-in flows.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from paperdesk.config import GithubAuthSettings, GoogleAuthSettings
from paperdesk.errors import InvalidInputError, UnauthorizedError
from paperdesk.kernel.identity.identity_service import IdentityService
from paperdesk.kernel.identity.jwt import (
    AccessTokenPayload,
    JWTManager,
    TokenPair,
    extract_bearer_token,
)
from paperdesk.kernel.identity.providers import GithubProvider, GoogleProvider
from paperdesk.kernel.models.user import (
    GithubUserInput,
    GoogleUserInput,
    User,
    UserByGithubId,
    UserByGoogleId,
    UserById,
)
from paperdesk.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GithubCodeInput:
    client_id: str
    code: str


@dataclass(frozen=True)
class GoogleCodeInput:
    client_id: str
    code: str


@dataclass(frozen=True)
class GoogleAccessTokenInput:
    access_token: str


@dataclass(frozen=True)
class RefreshTokenInput:
    refresh_token: str


CreateAccessTokenInput = Union[
    GithubCodeInput,
    GoogleCodeInput,
    GoogleAccessTokenInput,
    RefreshTokenInput,
]


class AuthService:
    """
    Issues token pairs.

    Provider flows find or create the linked user; the refresh flow only
    needs a valid refresh token and an existing user.
    """

    def __init__(
        self,
        identity: IdentityService,
        jwt_manager: JWTManager,
        github: Optional[GithubProvider] = None,
        google: Optional[GoogleProvider] = None,
        github_clients: Optional[List[GithubAuthSettings]] = None,
        google_clients: Optional[List[GoogleAuthSettings]] = None,
    ):
        self.identity = identity
        self.jwt_manager = jwt_manager
        self.github = github or GithubProvider()
        self.google = google or GoogleProvider()
        self.github_clients: Dict[str, GithubAuthSettings] = {
            c.client_id: c for c in github_clients or []
        }
        self.google_clients: Dict[str, GoogleAuthSettings] = {
            c.client_id: c for c in google_clients or []
        }

    async def create_access_token(self, input: CreateAccessTokenInput) -> TokenPair:
        """
        Sign the user in and issue a fresh token pair.

        Raises:
            InvalidInputError: unknown OAuth client id
            UnauthorizedError: rejected code, provider token or refresh token
            UnavailableError: provider or store unreachable
        """
        if isinstance(input, GithubCodeInput):
            user = await self._github_user(input)
        elif isinstance(input, (GoogleCodeInput, GoogleAccessTokenInput)):
            user = await self._google_user(input)
        elif isinstance(input, RefreshTokenInput):
            payload = self.jwt_manager.verify_refresh_token(input.refresh_token)
            user = await self.identity.select_user(UserById(payload.sub))
        else:
            raise TypeError(f"Unknown access token input: {input!r}")

        logger.info(
            "Access token created",
            extra={"user_id": user.id, "flow": type(input).__name__},
        )
        return self.jwt_manager.create_token_pair(user.id)

    async def _github_user(self, input: GithubCodeInput) -> User:
        client = self.github_clients.get(input.client_id)
        if client is None:
            raise InvalidInputError("Invalid client_id")

        access_token = await self.github.exchange_code(client.client_id, client.client_secret, input.code)
        profile = await self.github.fetch_user(access_token)

        return await self.identity.find_or_create_user(
            UserByGithubId(profile["id"]),
            GithubUserInput(github_user=profile),
        )

    async def _google_user(self, input: Union[GoogleCodeInput, GoogleAccessTokenInput]) -> User:
        if isinstance(input, GoogleCodeInput):
            client = self.google_clients.get(input.client_id)
            if client is None:
                raise InvalidInputError("Invalid client_id")
            access_token = await self.google.exchange_code(
                client.client_id,
                client.client_secret,
                input.code,
                redirect_uri=client.redirect_uri,
            )
        else:
            access_token = input.access_token

        profile = await self.google.fetch_user(access_token)

        return await self.identity.find_or_create_user(
            UserByGoogleId(profile["id"]),
            GoogleUserInput(google_user=profile),
        )

    def authenticate(self, authorization: Optional[str]) -> AccessTokenPayload:
        """
        Verify the session token from an Authorization header.

        Raises:
            UnauthorizedError: header missing or token invalid/expired
        """
        token = extract_bearer_token(authorization)
        if token is None:
            raise UnauthorizedError("AccessToken is not present")
        return self.jwt_manager.verify_access_token(token)
