"""
Paper Core - papers, their content history and resource tokens.
"""

from paperdesk.kernel.papers.paper_service import (
    DEFAULT_HISTORY_LIMIT,
    MAX_CONTENT_WRITE_ATTEMPTS,
    PaperService,
)

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "MAX_CONTENT_WRITE_ATTEMPTS",
    "PaperService",
]
