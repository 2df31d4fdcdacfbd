"""
Pagination Core - opaque cursors and keyset pagination.
"""

from paperdesk.kernel.pagination.cursor import PaperCursor, decode_cursor, encode_cursor
from paperdesk.kernel.pagination.keyset import paginate
from paperdesk.kernel.pagination.types import (
    AfterWindow,
    BeforeWindow,
    OrderBy,
    OrderDirection,
    PageResult,
    PaginationWindow,
    window_from_args,
)

__all__ = [
    "PaperCursor",
    "decode_cursor",
    "encode_cursor",
    "paginate",
    "AfterWindow",
    "BeforeWindow",
    "OrderBy",
    "OrderDirection",
    "PageResult",
    "PaginationWindow",
    "window_from_args",
]
