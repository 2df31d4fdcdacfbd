"""
Entity models and their document mapping.
"""

from paperdesk.kernel.models.base import from_doc, new_id, now_msec, to_doc
from paperdesk.kernel.models.paper import (
    Block,
    CreatePaperInput,
    Paper,
    PaperContent,
    PaperOrderField,
    UpdatePaperInput,
)
from paperdesk.kernel.models.user import (
    CreateUserInput,
    GithubUserInput,
    GoogleUserInput,
    UpdateUserInput,
    User,
    UserByGithubId,
    UserByGoogleId,
    UserById,
    UserByName,
    UserIdentifier,
)

__all__ = [
    "from_doc",
    "new_id",
    "now_msec",
    "to_doc",
    "Block",
    "CreatePaperInput",
    "Paper",
    "PaperContent",
    "PaperOrderField",
    "UpdatePaperInput",
    "CreateUserInput",
    "GithubUserInput",
    "GoogleUserInput",
    "UpdateUserInput",
    "User",
    "UserByGithubId",
    "UserByGoogleId",
    "UserById",
    "UserByName",
    "UserIdentifier",
]
