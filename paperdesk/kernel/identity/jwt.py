"""
JWT token management for authentication and resource-scoped access.

Three stateless token kinds, each signed with its own HMAC secret:
- access: short-lived session token identifying the viewer
- refresh: long-lived, exchanged for a new access token
- resource: grants time-limited access to exactly one paper, optionally
  restricted to read-only
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from paperdesk.config import Settings, get_settings
from paperdesk.errors import UnauthorizedError
from paperdesk.logging_config import get_logger

logger = get_logger(__name__)


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"
    RESOURCE = "resource"


class AccessTokenPayload(BaseModel):
    """Claims shared by every token kind."""

    sub: str  # User ID
    iat: int
    exp: int
    type: TokenKind = TokenKind.ACCESS


class RefreshTokenPayload(AccessTokenPayload):
    type: TokenKind = TokenKind.REFRESH


class ResourceTokenPayload(AccessTokenPayload):
    """
    Claims of a resource-scoped token.

    `read_only` is tri-state: None means the grant was not explicitly
    restricted.
    """

    type: TokenKind = TokenKind.RESOURCE
    resource_id: str
    read_only: Optional[bool] = None


_PAYLOAD_MODELS = {
    TokenKind.ACCESS: AccessTokenPayload,
    TokenKind.REFRESH: RefreshTokenPayload,
    TokenKind.RESOURCE: ResourceTokenPayload,
}


class TokenPair(BaseModel):
    """Access and refresh token pair."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int  # Seconds until access token expires
    refresh_token: str


class ResourceToken(BaseModel):
    """A minted resource-scoped token and its effective grant."""

    token: str
    resource_id: str
    read_only: Optional[bool] = None
    expires_in: int


@dataclass(frozen=True)
class TokenConfig:
    secret: str
    expires_in_sec: int


class JWTManager:
    """
    JWT token creation and verification.

    Expiry is enforced here rather than by the JWT library so that the
    boundary is exact: a token is expired once now >= exp.
    """

    def __init__(
        self,
        access: TokenConfig,
        refresh: TokenConfig,
        resource: TokenConfig,
        algorithm: str = "HS256",
        clock: Callable[[], float] = time.time,
    ):
        self.configs = {
            TokenKind.ACCESS: access,
            TokenKind.REFRESH: refresh,
            TokenKind.RESOURCE: resource,
        }
        self.algorithm = algorithm
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "JWTManager":
        settings = settings or get_settings()
        return cls(
            access=TokenConfig(settings.access_token.secret, settings.access_token.expires_in_sec),
            refresh=TokenConfig(settings.refresh_token.secret, settings.refresh_token.expires_in_sec),
            resource=TokenConfig(settings.paper_token.secret, settings.paper_token.expires_in_sec),
            algorithm=settings.algorithm,
        )

    @property
    def access_expires_in(self) -> int:
        return self.configs[TokenKind.ACCESS].expires_in_sec

    def _now(self) -> int:
        return int(self.clock())

    def _encode(self, kind: TokenKind, claims: dict) -> str:
        config = self.configs[kind]
        now = self._now()
        payload = {
            **claims,
            "iat": now,
            "exp": now + config.expires_in_sec,
            "type": kind.value,
        }
        return jwt.encode(payload, config.secret, algorithm=self.algorithm)

    def create_access_token(self, user_id: str) -> str:
        """Create a session token for the user."""
        return self._encode(TokenKind.ACCESS, {"sub": user_id})

    def create_refresh_token(self, user_id: str) -> str:
        return self._encode(TokenKind.REFRESH, {"sub": user_id})

    def create_token_pair(self, user_id: str) -> TokenPair:
        """
        Create both access and refresh tokens.

        Args:
            user_id: User's unique identifier

        Returns:
            TokenPair with the access token lifetime in expires_in
        """
        token_pair = TokenPair(
            access_token=self.create_access_token(user_id),
            expires_in=self.access_expires_in,
            refresh_token=self.create_refresh_token(user_id),
        )
        logger.info("Token pair issued", extra={"user_id": user_id})
        return token_pair

    def create_resource_token(
        self,
        user_id: str,
        resource_id: str,
        read_only: Optional[bool] = None,
    ) -> ResourceToken:
        """
        Create a token scoped to one resource.

        The caller is responsible for having checked the viewer's capability
        on the resource; this only mints the claims it is given.
        """
        claims = {"sub": user_id, "resource_id": resource_id}
        if read_only is not None:
            claims["read_only"] = read_only
        return ResourceToken(
            token=self._encode(TokenKind.RESOURCE, claims),
            resource_id=resource_id,
            read_only=read_only,
            expires_in=self.configs[TokenKind.RESOURCE].expires_in_sec,
        )

    def verify_token(self, token: str, kind: TokenKind) -> AccessTokenPayload:
        """
        Verify signature, kind and expiry of a token.

        Raises:
            UnauthorizedError: on any verification failure
        """
        config = self.configs[kind]
        try:
            claims = jwt.decode(
                token,
                config.secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise UnauthorizedError(f"Invalid {kind.value} token: {exc}") from exc

        try:
            payload = _PAYLOAD_MODELS[kind].model_validate(claims)
        except ValidationError as exc:
            raise UnauthorizedError(f"Malformed {kind.value} token claims") from exc

        if payload.type != kind:
            raise UnauthorizedError(f"Expected {kind.value} token, got {payload.type.value}")

        if self._now() >= payload.exp:
            raise UnauthorizedError(f"The {kind.value} token has expired")

        return payload

    def verify_access_token(self, token: str) -> AccessTokenPayload:
        return self.verify_token(token, TokenKind.ACCESS)

    def verify_refresh_token(self, token: str) -> RefreshTokenPayload:
        return self.verify_token(token, TokenKind.REFRESH)

    def verify_resource_token(self, token: str) -> ResourceTokenPayload:
        return self.verify_token(token, TokenKind.RESOURCE)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]
