"""
Keyset (cursor) pagination over a document store.

The store only offers filter + sort + skip + limit, so a page is computed as:

1. Resolve the physical sort direction and comparison operator from the
   window kind and the requested direction. (after, ASC) and (before, DESC)
   walk ascending with $gt; (after, DESC) and (before, ASC) walk descending
   with $lt.
2. Turn the cursor into a predicate on (field, _id). Cursors only carry the
   id, so for any other field the cursor row is looked up to get its field
   value and ties on the field are broken by _id.
3. AND the predicate with the caller's filter, fetch size + 1 rows (the
   extra "peek" row tells whether another page exists), honoring skip.
4. Drop the peek row, then put before-pages back into the requested order.
5. Count the caller's filter on its own for `total`.
"""

from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from paperdesk.errors import storage_errors
from paperdesk.kernel.models.base import from_doc
from paperdesk.kernel.pagination.types import (
    AfterWindow,
    OrderBy,
    OrderDirection,
    PageResult,
    PaginationWindow,
)
from paperdesk.kernel.storage.collection import (
    ASCENDING,
    DESCENDING,
    Document,
    DocumentCollection,
)
from paperdesk.logging_config import get_logger

logger = get_logger(__name__)

ID_FIELD = "_id"


def resolve_direction(window: PaginationWindow, direction: OrderDirection) -> tuple[int, str]:
    """
    Map (window kind, requested direction) to (physical sort, operator).

    Returns:
        Tuple of (ASCENDING or DESCENDING, "$gt" or "$lt")
    """
    forward = isinstance(window, AfterWindow)
    ascending = direction == OrderDirection.ASC
    if forward == ascending:
        return ASCENDING, "$gt"
    return DESCENDING, "$lt"


async def cursor_predicate(
    collection: DocumentCollection,
    field: str,
    op: str,
    cursor: Optional[str],
) -> Dict[str, Any]:
    """
    Build the filter selecting rows strictly past the cursor.

    A cursor whose row no longer exists yields no predicate, so stale
    cursors restart from the beginning instead of failing.
    """
    if cursor is None:
        return {}
    if field == ID_FIELD:
        return {ID_FIELD: {op: cursor}}

    row = await collection.find_one({ID_FIELD: cursor}, projection={field: 1})
    if row is None:
        logger.debug("Cursor row not found, paginating from start", extra={"cursor_id": cursor})
        return {}
    if field not in row:
        return {ID_FIELD: {op: cursor}}

    value = row[field]
    return {
        "$or": [
            {field: {op: value}},
            {field: value, ID_FIELD: {op: cursor}},
        ],
    }


async def paginate(
    collection: DocumentCollection,
    window: PaginationWindow,
    order_by: OrderBy[str],
    filter: Optional[Document] = None,
    projection: Optional[Document] = None,
    model: Optional[Type[BaseModel]] = None,
) -> PageResult:
    """
    Return one page of `collection` matching `filter`.

    Args:
        collection: Store collection to page through
        window: AfterWindow or BeforeWindow holding a decoded cursor id
        order_by: Storage field name and direction
        filter: Caller filter; also the basis for `total`
        projection: Optional store projection for the page query
        model: Entity model to load documents into; raw documents if None

    Returns:
        PageResult in the caller's requested order

    Raises:
        UnavailableError: when the store fails
    """
    filter = dict(filter or {})
    field = order_by.field
    direction, op = resolve_direction(window, order_by.direction)

    sort = [(field, direction)]
    if field != ID_FIELD:
        sort.append((ID_FIELD, direction))

    with storage_errors("resolve cursor"):
        predicate = await cursor_predicate(collection, field, op, window.cursor)

    if predicate and filter:
        query: Document = {"$and": [predicate, filter]}
    else:
        query = predicate or filter

    with storage_errors("find page"):
        documents = await collection.find(
            query,
            sort=sort,
            skip=window.skip,
            limit=window.size + 1,
            projection=projection,
        )

    has_next_page = len(documents) > window.size
    documents = documents[:window.size]

    if not isinstance(window, AfterWindow):
        documents.reverse()

    with storage_errors("count documents"):
        total = await collection.count_documents(filter)

    logger.debug(
        "Page fetched",
        extra={
            "order_field": field,
            "physical_direction": direction,
            "cursor_id": window.cursor,
            "page_size": window.size,
            "returned": len(documents),
            "total": total,
        },
    )

    if model is None:
        return PageResult(items=documents, total=total, has_next_page=has_next_page)

    return PageResult[model](
        items=[from_doc(model, doc) for doc in documents],
        total=total,
        has_next_page=has_next_page,
    )
