"""
External identity providers: OAuth code exchange and profile lookup.

GitHub users are keyed by a numeric `id`, Google users by a string `id`.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from paperdesk.errors import UnauthorizedError, UnavailableError, UnknownError
from paperdesk.logging_config import get_logger

logger = get_logger(__name__)

HTTP_TIMEOUT = 10.0


class IdentityProvider(ABC):
    """OAuth provider the auth service exchanges codes against."""

    name: str

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=HTTP_TIMEOUT, transport=self._transport)

    async def _request(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning(
                "Identity provider unreachable",
                extra={"provider": self.name, "error": str(exc)},
            )
            raise UnavailableError(f"{self.name} is unavailable: {exc}") from exc

        if response.status_code != 200:
            raise UnauthorizedError(f"{self.name} rejected the request: HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise UnknownError(f"Invalid {self.name} response") from exc
        if not isinstance(body, dict):
            raise UnknownError(f"Invalid {self.name} response")
        return body

    @abstractmethod
    async def exchange_code(self, client_id: str, client_secret: str, code: str, **kwargs: Any) -> str:
        """Exchange an authorization code for a provider access token."""

    @abstractmethod
    async def fetch_user(self, access_token: str) -> Dict[str, Any]:
        """Fetch the provider's user profile."""


class GithubProvider(IdentityProvider):
    name = "github"

    TOKEN_URL = "https://github.com/login/oauth/access_token"
    USER_URL = "https://api.github.com/user"

    async def exchange_code(self, client_id: str, client_secret: str, code: str, **kwargs: Any) -> str:
        body = await self._request(
            "POST",
            self.TOKEN_URL,
            params={"client_id": client_id, "client_secret": client_secret, "code": code},
            headers={"Accept": "application/json"},
        )
        access_token = body.get("access_token")
        if access_token:
            return access_token
        raise UnauthorizedError(body.get("error_description") or "GitHub code exchange failed")

    async def fetch_user(self, access_token: str) -> Dict[str, Any]:
        user = await self._request(
            "GET",
            self.USER_URL,
            headers={
                "Accept": "application/json",
                "Authorization": f"token {access_token}",
            },
        )
        # bool is an int subclass; GitHub ids are plain integers
        if not isinstance(user.get("id"), int) or isinstance(user.get("id"), bool):
            raise UnknownError("Invalid github user response")
        return user


class GoogleProvider(IdentityProvider):
    name = "google"

    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USER_URL = "https://www.googleapis.com/oauth2/v1/userinfo"

    async def exchange_code(self, client_id: str, client_secret: str, code: str, **kwargs: Any) -> str:
        body = await self._request(
            "POST",
            self.TOKEN_URL,
            params={
                "grant_type": "authorization_code",
                "client_id": client_id,
                "client_secret": client_secret,
                "code": code,
                "redirect_uri": kwargs.get("redirect_uri", ""),
            },
            headers={"Accept": "application/json"},
        )
        access_token = body.get("access_token")
        if not access_token:
            raise UnauthorizedError("Google code exchange failed")
        return access_token

    async def fetch_user(self, access_token: str) -> Dict[str, Any]:
        user = await self._request(
            "GET",
            self.USER_URL,
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {access_token}",
            },
        )
        if not isinstance(user.get("id"), str):
            raise UnknownError("Invalid google user response")
        return user
