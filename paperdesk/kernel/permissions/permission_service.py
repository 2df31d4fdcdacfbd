"""
Capability guard for owner-scoped access control.

Every data-access entry point asks this service before touching storage.
The ownership model is single-tenant: a viewer holds a capability on a
user's resources iff the viewer is that user.
"""

from enum import Enum

from paperdesk.errors import ForbiddenError, NotFoundError, storage_errors
from paperdesk.kernel.models.base import from_doc
from paperdesk.kernel.models.user import USER_PROJECTION, User
from paperdesk.kernel.storage.collection import DocumentCollection
from paperdesk.logging_config import get_logger

logger = get_logger(__name__)


class Capability(str, Enum):
    """Capabilities checked per (viewer, owner) pair."""
    READ = "read"
    WRITE = "write"
    ADMINISTER = "administer"


class PermissionService:
    """
    Service answering "can viewer V do A on resources owned by O".

    Checks are idempotent and side-effect free. The owning user is looked
    up as part of the check and returned, so callers need no second read.
    """

    def __init__(self, users: DocumentCollection):
        self.users = users

    async def _find_owner(self, owner_id: str) -> User:
        with storage_errors("find owner"):
            doc = await self.users.find_one({"_id": owner_id}, projection=USER_PROJECTION)
        if doc is None:
            raise NotFoundError("User not found")
        return from_doc(User, doc)

    async def check(self, capability: Capability, viewer_id: str, owner_id: str) -> User:
        """
        Require `capability` for viewer on owner's resources.

        Returns:
            The owning User

        Raises:
            NotFoundError: if the owner does not exist
            ForbiddenError: if the viewer lacks the capability
        """
        owner = await self._find_owner(owner_id)

        if viewer_id == owner.id:
            return owner

        logger.info(
            "Capability denied",
            extra={"capability": capability.value, "acting_viewer": viewer_id, "owner_id": owner_id},
        )
        raise ForbiddenError(f"You are not allowed to {capability.value} this user")

    async def can_read(self, viewer_id: str, owner_id: str) -> User:
        return await self.check(Capability.READ, viewer_id, owner_id)

    async def can_write(self, viewer_id: str, owner_id: str) -> User:
        return await self.check(Capability.WRITE, viewer_id, owner_id)

    async def can_administer(self, viewer_id: str, owner_id: str) -> User:
        """Account-level operations such as profile changes."""
        return await self.check(Capability.ADMINISTER, viewer_id, owner_id)

    async def allows(self, capability: Capability, viewer_id: str, owner_id: str) -> bool:
        """Boolean form of check(); only Forbidden maps to False."""
        try:
            await self.check(capability, viewer_id, owner_id)
        except ForbiddenError:
            return False
        return True
