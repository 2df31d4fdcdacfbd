"""
Paper Service - owner-scoped paper storage, listing and resource tokens.

Papers keep their metadata and their content in separate collections.
Content documents additionally carry a `revision` counter used for
compare-and-set writes, and a bounded `history` of previous contents.
"""

from typing import Any, Dict, List, Optional, Tuple

from paperdesk.errors import (
    ForbiddenError,
    NotFoundError,
    UnavailableError,
    storage_errors,
)
from paperdesk.kernel.identity.jwt import JWTManager, ResourceToken
from paperdesk.kernel.models.base import from_doc, new_id, now_msec, to_doc
from paperdesk.kernel.models.paper import (
    PAPER_CONTENT_PROJECTION,
    PAPER_PROJECTION,
    Block,
    CreatePaperInput,
    Paper,
    PaperContent,
    PaperOrderField,
    UpdatePaperInput,
)
from paperdesk.kernel.pagination.keyset import paginate
from paperdesk.kernel.pagination.types import (
    OrderBy,
    PageResult,
    PaginationWindow,
)
from paperdesk.kernel.permissions.permission_service import PermissionService
from paperdesk.kernel.storage.collection import DocumentCollection, ReturnDocument
from paperdesk.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_HISTORY_LIMIT = 10
MAX_CONTENT_WRITE_ATTEMPTS = 3


def _dump_blocks(content: Optional[List[Block]]) -> Optional[List[Dict[str, Any]]]:
    if content is None:
        return None
    return [block.model_dump(mode="json") for block in content]


class PaperService:
    """
    Service for paper operations.

    Every entry point runs the capability guard against the owning user
    before touching storage.
    """

    def __init__(
        self,
        papers: DocumentCollection,
        contents: DocumentCollection,
        permissions: PermissionService,
        jwt_manager: JWTManager,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self.papers = papers
        self.contents = contents
        self.permissions = permissions
        self.jwt_manager = jwt_manager
        self.history_limit = history_limit

    async def create_paper(
        self,
        viewer_id: str,
        owner_id: str,
        input: CreatePaperInput,
    ) -> Tuple[Paper, PaperContent]:
        """
        Create a paper and its content for owner.

        Raises:
            ForbiddenError: if the viewer cannot write to the owner
            NotFoundError: if the owner does not exist
        """
        await self.permissions.can_write(viewer_id, owner_id)

        now = now_msec()
        paper = Paper(
            id=new_id(),
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
            title=input.title,
        )
        content = PaperContent(id=paper.id, content=input.content)

        content_doc = to_doc(content)
        content_doc["revision"] = 0
        content_doc["history"] = []

        # Content first: a failed paper insert leaves nothing listable
        with storage_errors("insert paper content"):
            await self.contents.insert_one(content_doc)
        with storage_errors("insert paper"):
            await self.papers.insert_one(to_doc(paper))

        logger.info("Paper created", extra={"paper_id": paper.id, "owner_id": owner_id})
        return paper, content

    async def update_paper(
        self,
        viewer_id: str,
        owner_id: str,
        paper_id: str,
        input: UpdatePaperInput,
    ) -> Tuple[Paper, PaperContent]:
        """
        Update title and/or content. `updated_at` is always bumped.

        The previous content is pushed into the bounded history only when
        the content actually changes.

        Raises:
            ForbiddenError: if the viewer cannot write to the owner
            NotFoundError: if the paper does not belong to the owner
            UnavailableError: if concurrent content writes keep winning
        """
        await self.can_viewer_write_paper(viewer_id, owner_id, paper_id)

        # Metadata is written only once the content revision has committed
        if input.content is None:
            content = await self._find_content(paper_id)
        else:
            content = await self._write_content(paper_id, _dump_blocks(input.content))

        update_set: Dict[str, Any] = {"updated_at": now_msec()}
        if input.title is not None:
            update_set["title"] = input.title

        with storage_errors("update paper"):
            doc = await self.papers.find_one_and_update(
                {"_id": paper_id},
                {"$set": update_set},
                projection=PAPER_PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            raise NotFoundError("Paper not found")
        paper = from_doc(Paper, doc)

        logger.info(
            "Paper updated",
            extra={"paper_id": paper_id, "content_changed": input.content is not None},
        )
        return paper, content

    async def _write_content(self, paper_id: str, new_content: List[Dict[str, Any]]) -> PaperContent:
        for attempt in range(1, MAX_CONTENT_WRITE_ATTEMPTS + 1):
            with storage_errors("find paper content"):
                current = await self.contents.find_one(
                    {"_id": paper_id},
                    projection={"_id": 1, "content": 1, "revision": 1},
                )
            if current is None:
                raise NotFoundError("Paper content not found")

            revision = current.get("revision", 0)
            old_content = current.get("content")

            update: Dict[str, Any] = {
                "$set": {"content": new_content},
                "$inc": {"revision": 1},
            }
            if old_content != new_content and old_content is not None:
                update["$push"] = {
                    "history": {
                        "$each": [{"content": old_content}],
                        "$slice": -self.history_limit,
                    },
                }

            # Documents written before revisions existed have no counter
            revision_filter: Any = revision if "revision" in current else {"$exists": False}

            with storage_errors("update paper content"):
                doc = await self.contents.find_one_and_update(
                    {"_id": paper_id, "revision": revision_filter},
                    update,
                    projection=PAPER_CONTENT_PROJECTION,
                    return_document=ReturnDocument.AFTER,
                )
            if doc is not None:
                return from_doc(PaperContent, doc)

            logger.info(
                "Paper content write lost a race, retrying",
                extra={"paper_id": paper_id, "attempt": attempt, "revision": revision},
            )

        raise UnavailableError("Paper content is being modified concurrently")

    async def delete_paper(self, viewer_id: str, owner_id: str, paper_id: str) -> None:
        """Soft delete: sets deleted_at once, the paper stays in storage."""
        await self.can_viewer_write_paper(viewer_id, owner_id, paper_id)

        with storage_errors("delete paper"):
            await self.papers.find_one_and_update(
                {"_id": paper_id, "deleted_at": None},
                {"$set": {"deleted_at": now_msec()}},
                projection={"_id": 1},
            )

        logger.info("Paper deleted", extra={"paper_id": paper_id})

    async def select_paper(self, viewer_id: str, owner_id: str, paper_id: str) -> Paper:
        return await self.can_viewer_read_paper(viewer_id, owner_id, paper_id)

    async def select_paper_content(self, viewer_id: str, owner_id: str, paper_id: str) -> PaperContent:
        await self.can_viewer_read_paper(viewer_id, owner_id, paper_id)
        return await self._find_content(paper_id)

    async def select_paper_page(
        self,
        viewer_id: str,
        owner_id: str,
        window: PaginationWindow,
        order_by: Optional[OrderBy[PaperOrderField]] = None,
        deleted: bool = False,
    ) -> PageResult[Paper]:
        """
        List the owner's papers one page at a time.

        Args:
            viewer_id: The acting user
            owner_id: Whose papers to list
            window: After/before window with a decoded cursor id
            order_by: Defaults to id ascending
            deleted: List soft-deleted papers instead of live ones

        Returns:
            PageResult of Paper in the requested order
        """
        await self.permissions.can_read(viewer_id, owner_id)

        order_by = order_by or OrderBy[PaperOrderField](field=PaperOrderField.ID)

        filter: Dict[str, Any] = {"owner_id": owner_id}
        if deleted:
            filter["deleted_at"] = {"$exists": True, "$ne": None}
        else:
            filter["deleted_at"] = None

        return await paginate(
            self.papers,
            window,
            OrderBy[str](field=order_by.field.storage_field, direction=order_by.direction),
            filter=filter,
            projection=PAPER_PROJECTION,
            model=Paper,
        )

    async def can_viewer_read_paper(self, viewer_id: str, owner_id: str, paper_id: str) -> Paper:
        await self.permissions.can_read(viewer_id, owner_id)
        return await self._find_paper(owner_id, paper_id)

    async def can_viewer_write_paper(self, viewer_id: str, owner_id: str, paper_id: str) -> Paper:
        await self.permissions.can_write(viewer_id, owner_id)
        return await self._find_paper(owner_id, paper_id)

    async def create_paper_token(
        self,
        viewer_id: str,
        owner_id: str,
        paper_id: str,
        read_only: Optional[bool] = None,
    ) -> ResourceToken:
        """
        Mint a token scoped to one paper.

        A viewer who can write gets the requested read_only flag as-is. A
        viewer who can only read gets read_only=True regardless of the
        request.

        Raises:
            ForbiddenError: if the viewer can neither write nor read
            NotFoundError: if the paper does not belong to the owner
        """
        try:
            await self.can_viewer_write_paper(viewer_id, owner_id, paper_id)
        except ForbiddenError:
            await self.can_viewer_read_paper(viewer_id, owner_id, paper_id)
            read_only = True

        token = self.jwt_manager.create_resource_token(viewer_id, paper_id, read_only=read_only)
        logger.info(
            "Paper token issued",
            extra={"paper_id": paper_id, "acting_viewer": viewer_id, "read_only": read_only},
        )
        return token

    async def _find_paper(self, owner_id: str, paper_id: str) -> Paper:
        with storage_errors("find paper"):
            doc = await self.papers.find_one(
                {"_id": paper_id, "owner_id": owner_id},
                projection=PAPER_PROJECTION,
            )
        if doc is None:
            raise NotFoundError("Paper not found")
        return from_doc(Paper, doc)

    async def _find_content(self, paper_id: str) -> PaperContent:
        with storage_errors("find paper content"):
            doc = await self.contents.find_one(
                {"_id": paper_id},
                projection=PAPER_CONTENT_PROJECTION,
            )
        if doc is None:
            raise NotFoundError("Paper content not found")
        return from_doc(PaperContent, doc)
