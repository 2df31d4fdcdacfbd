"""
Document store interface consumed by the core.

Documents are schema-less maps. Filters and updates use the MongoDB operator
subset listed on DocumentCollection. The store's native identity field is
always "_id"; entity models translate it to "id" at the boundary.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

Document = Dict[str, Any]
SortSpec = Sequence[Tuple[str, int]]

ASCENDING = 1
DESCENDING = -1


class ReturnDocument(str, Enum):
    """Which version find_one_and_update hands back."""
    BEFORE = "before"
    AFTER = "after"


class DocumentCollection(ABC):
    """
    Abstract collection of documents.

    Supported filter operators: $and, $or, $gt, $gte, $lt, $lte, $ne, $in,
    $exists, plus literal equality (null matches a missing field).
    Supported update operators: $set, $unset, $inc, $push (with $each and
    $slice).

    Implementations raise paperdesk.errors.StorageError when the store cannot
    serve a call.
    """

    @abstractmethod
    async def find(
        self,
        filter: Optional[Document] = None,
        sort: Optional[SortSpec] = None,
        skip: Optional[int] = None,
        limit: Optional[int] = None,
        projection: Optional[Document] = None,
    ) -> List[Document]:
        """Return matching documents; limit of None or 0 means no limit."""

    @abstractmethod
    async def find_one(
        self,
        filter: Document,
        projection: Optional[Document] = None,
    ) -> Optional[Document]:
        ...

    @abstractmethod
    async def find_one_and_update(
        self,
        filter: Document,
        update: Document,
        projection: Optional[Document] = None,
        return_document: ReturnDocument = ReturnDocument.BEFORE,
    ) -> Optional[Document]:
        """Atomically apply update to the first match. None when nothing matched."""

    @abstractmethod
    async def count_documents(self, filter: Optional[Document] = None) -> int:
        ...

    @abstractmethod
    async def insert_one(self, document: Document) -> Any:
        """Insert and return the new document's _id."""
