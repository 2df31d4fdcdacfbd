"""
User model and the identifier / creation input unions.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, model_validator


class User(BaseModel):
    """A principal. Linked to at most one external identity provider."""

    id: str
    created_at: int
    name: str
    github_user: Optional[Dict[str, Any]] = None
    google_user: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def single_provider(self) -> "User":
        if self.github_user is not None and self.google_user is not None:
            raise ValueError("A user is linked to at most one identity provider")
        return self


class UpdateUserInput(BaseModel):
    """Profile update. Unset fields are left untouched."""

    name: Optional[str] = None


# Identifier variants

@dataclass(frozen=True)
class UserById:
    id: str


@dataclass(frozen=True)
class UserByName:
    name: str


@dataclass(frozen=True)
class UserByGithubId:
    github_user_id: int


@dataclass(frozen=True)
class UserByGoogleId:
    google_user_id: str


UserIdentifier = Union[UserById, UserByName, UserByGithubId, UserByGoogleId]


def user_filter(identifier: UserIdentifier) -> Dict[str, Any]:
    """Build the store filter selecting a user by identifier."""
    if isinstance(identifier, UserById):
        return {"_id": identifier.id}
    if isinstance(identifier, UserByName):
        return {"name": identifier.name}
    if isinstance(identifier, UserByGithubId):
        return {"github_user.id": identifier.github_user_id}
    if isinstance(identifier, UserByGoogleId):
        return {"google_user.id": identifier.google_user_id}
    raise TypeError(f"Unknown user identifier: {identifier!r}")


# Creation variants, one per identity provider

@dataclass(frozen=True)
class GithubUserInput:
    github_user: Dict[str, Any]


@dataclass(frozen=True)
class GoogleUserInput:
    google_user: Dict[str, Any]


CreateUserInput = Union[GithubUserInput, GoogleUserInput]


USER_PROJECTION = {
    "_id": 1,
    "created_at": 1,
    "name": 1,
    "github_user": 1,
    "google_user": 1,
}
