"""
Identity service for user management operations.
"""

from typing import Any, Dict

from paperdesk.errors import NotFoundError, UnknownError, storage_errors
from paperdesk.kernel.models.base import from_doc, new_id, now_msec, to_doc
from paperdesk.kernel.models.user import (
    USER_PROJECTION,
    CreateUserInput,
    GithubUserInput,
    GoogleUserInput,
    UpdateUserInput,
    User,
    UserById,
    UserIdentifier,
    user_filter,
)
from paperdesk.kernel.permissions.permission_service import PermissionService
from paperdesk.kernel.storage.collection import DocumentCollection, ReturnDocument
from paperdesk.logging_config import get_logger

logger = get_logger(__name__)


def _profile_name(profile: Dict[str, Any], provider: str) -> str:
    name = profile.get("name")
    if provider == "github" and not name:
        # GitHub profiles may have no display name; fall back to the login
        name = profile.get("login")
    if not isinstance(name, str) or not name:
        raise UnknownError(f"Invalid {provider} user name")
    return name


class IdentityService:
    """
    Service for user identity operations.

    Handles user creation from provider profiles, lookups, profile updates
    and the user-level capability checks.
    """

    def __init__(self, users: DocumentCollection, permissions: PermissionService):
        self.users = users
        self.permissions = permissions

    async def create_user(self, input: CreateUserInput) -> User:
        """
        Create a user from an identity provider profile.

        Raises:
            UnknownError: if the profile carries no usable name
        """
        if isinstance(input, GithubUserInput):
            user = User(
                id=new_id(),
                created_at=now_msec(),
                name=_profile_name(input.github_user, "github"),
                github_user=input.github_user,
            )
        elif isinstance(input, GoogleUserInput):
            user = User(
                id=new_id(),
                created_at=now_msec(),
                name=_profile_name(input.google_user, "google"),
                google_user=input.google_user,
            )
        else:
            raise TypeError(f"Unknown user input: {input!r}")

        with storage_errors("insert user"):
            await self.users.insert_one(to_doc(user))

        logger.info("User created", extra={"user_id": user.id})
        return user

    async def select_user(self, identifier: UserIdentifier) -> User:
        """
        Raises:
            NotFoundError: if no user matches
        """
        with storage_errors("find user"):
            doc = await self.users.find_one(user_filter(identifier), projection=USER_PROJECTION)
        if doc is None:
            raise NotFoundError("User not found")
        return from_doc(User, doc)

    async def update_user(self, viewer_id: str, user_id: str, input: UpdateUserInput) -> User:
        """
        Update the user's profile. Requires the administer capability.

        Args:
            viewer_id: The acting user
            user_id: The user being updated
            input: Fields to change; unset fields stay as they are

        Returns:
            The updated User
        """
        user = await self.permissions.can_administer(viewer_id, user_id)

        update_set = input.model_dump(exclude_none=True)
        if not update_set:
            return user

        with storage_errors("update user"):
            doc = await self.users.find_one_and_update(
                {"_id": user_id},
                {"$set": update_set},
                projection=USER_PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            raise NotFoundError("User not found")

        logger.info("User updated", extra={"user_id": user_id, "fields": sorted(update_set)})
        return from_doc(User, doc)

    async def find_or_create_user(self, identifier: UserIdentifier, input: CreateUserInput) -> User:
        """Return the user matching identifier, creating it from input if absent."""
        try:
            return await self.select_user(identifier)
        except NotFoundError:
            return await self.create_user(input)

    async def can_viewer_read_user(self, viewer_id: str, user_id: str) -> User:
        return await self.permissions.can_read(viewer_id, user_id)

    async def can_viewer_write_user(self, viewer_id: str, user_id: str) -> User:
        return await self.permissions.can_write(viewer_id, user_id)

    async def can_viewer_administer_user(self, viewer_id: str, user_id: str) -> User:
        return await self.permissions.can_administer(viewer_id, user_id)

    async def get_viewer(self, viewer_id: str) -> User:
        """The authenticated viewer's own profile."""
        return await self.select_user(UserById(viewer_id))
