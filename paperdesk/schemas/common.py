"""
Common schema types used by transports.
"""

from typing import Callable, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from paperdesk.kernel.models.paper import Paper
from paperdesk.kernel.pagination.cursor import PaperCursor
from paperdesk.kernel.pagination.types import PageResult

T = TypeVar("T")


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: Optional[str] = None


class PageInfo(BaseModel):
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None
    has_next_page: bool = False


class Edge(BaseModel, Generic[T]):
    node: T
    cursor: str


class Connection(BaseModel, Generic[T]):
    """Relay-style connection over one page."""

    edges: List[Edge[T]] = Field(default_factory=list)
    nodes: List[T] = Field(default_factory=list)
    page_info: PageInfo
    total: int

    @classmethod
    def from_page(cls, page: PageResult, cursor_for: Callable[[T], str]) -> "Connection[T]":
        """
        Build a connection from a page result.

        Args:
            page: Items in display order
            cursor_for: Encodes the opaque cursor of one item
        """
        cursors = [cursor_for(item) for item in page.items]
        return cls(
            edges=[{"node": item, "cursor": cursor} for item, cursor in zip(page.items, cursors)],
            nodes=list(page.items),
            page_info=PageInfo(
                start_cursor=cursors[0] if cursors else None,
                end_cursor=cursors[-1] if cursors else None,
                has_next_page=page.has_next_page,
            ),
            total=page.total,
        )


def paper_connection(page: PageResult[Paper]) -> Connection[Paper]:
    return Connection[Paper].from_page(page, lambda paper: PaperCursor(id=paper.id).encode())
