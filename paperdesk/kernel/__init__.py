"""
Kernel Layer

Foundational components every transport builds on:
- Document storage (collection interface + in-memory driver)
- Keyset pagination (cursor, window, page engine)
- Identity Core (users, sign-in flows, tokens)
- Permission Core (owner-scoped capability guard)
- Paper Core (papers, content history, resource tokens)

Invariants:
- Every read and write path runs the capability guard first
- Resource tokens never grant more than the viewer's live capability
"""

from paperdesk.kernel.models import (
    Paper,
    PaperContent,
    PaperOrderField,
    User,
)
from paperdesk.kernel.pagination import (
    AfterWindow,
    BeforeWindow,
    OrderBy,
    OrderDirection,
    PageResult,
    PaperCursor,
)
from paperdesk.kernel.permissions import Capability, PermissionService

__all__ = [
    # Models
    "Paper",
    "PaperContent",
    "PaperOrderField",
    "User",
    # Pagination
    "AfterWindow",
    "BeforeWindow",
    "OrderBy",
    "OrderDirection",
    "PageResult",
    "PaperCursor",
    # Permissions
    "Capability",
    "PermissionService",
]
