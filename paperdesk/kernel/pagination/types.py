"""
Pagination request and result types.
"""

from enum import Enum
from typing import Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, Field, ValidationError

from paperdesk.errors import InvalidInputError
from paperdesk.kernel.pagination.cursor import PaperCursor

T = TypeVar("T")
F = TypeVar("F")


class OrderDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class OrderBy(BaseModel, Generic[F]):
    """Sort field plus direction. The entity id always breaks ties."""

    field: F
    direction: OrderDirection = OrderDirection.ASC


class AfterWindow(BaseModel):
    """Forward window: `first` items after the `after` key."""

    after: Optional[str] = None
    skip: Optional[int] = Field(None, ge=0)
    first: int = Field(..., ge=0)

    @property
    def cursor(self) -> Optional[str]:
        return self.after

    @property
    def size(self) -> int:
        return self.first


class BeforeWindow(BaseModel):
    """Backward window: `last` items before the `before` key."""

    before: Optional[str] = None
    skip: Optional[int] = Field(None, ge=0)
    last: int = Field(..., ge=0)

    @property
    def cursor(self) -> Optional[str]:
        return self.before

    @property
    def size(self) -> int:
        return self.last


PaginationWindow = Union[AfterWindow, BeforeWindow]


class PageResult(BaseModel, Generic[T]):
    """
    One page of a listing.

    `total` counts everything matching the filter, ignoring the window.
    """

    items: List[T]
    total: int
    has_next_page: bool = False


def _cursor_key(value: Optional[str], strict: bool) -> Optional[str]:
    if value is None:
        return None
    cursor = PaperCursor.decode(value)
    if cursor is None:
        if strict:
            raise InvalidInputError("Undecodable cursor")
        return None
    return cursor.id


def window_from_args(
    *,
    after: Optional[str] = None,
    before: Optional[str] = None,
    first: Optional[int] = None,
    last: Optional[int] = None,
    skip: Optional[int] = None,
    strict_cursor: bool = False,
) -> PaginationWindow:
    """
    Build a window from transport arguments carrying encoded cursors.

    Exactly one of `first`/`last` must be given. An undecodable cursor is
    treated as absent unless `strict_cursor` is set.

    Raises:
        InvalidInputError: on a malformed window
    """
    if (first is None) == (last is None):
        raise InvalidInputError("Exactly one of first or last is required")

    try:
        if first is not None:
            return AfterWindow(
                after=_cursor_key(after, strict_cursor),
                skip=skip,
                first=first,
            )
        return BeforeWindow(
            before=_cursor_key(before, strict_cursor),
            skip=skip,
            last=last,
        )
    except ValidationError as exc:
        raise InvalidInputError(f"Invalid pagination window: {exc}") from exc
