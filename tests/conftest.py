"""
Pytest fixtures for paperdesk tests.
"""

from typing import Any, Dict

import pytest
import pytest_asyncio

from paperdesk.kernel.identity.identity_service import IdentityService
from paperdesk.kernel.identity.jwt import JWTManager, TokenConfig
from paperdesk.kernel.models.base import to_doc
from paperdesk.kernel.models.user import User
from paperdesk.kernel.papers.paper_service import PaperService
from paperdesk.kernel.permissions.permission_service import PermissionService
from paperdesk.kernel.storage.memory import MemoryCollection, MemoryDatabase

FIXED_NOW = 1_700_000_000


class FakeClock:
    """Settable clock for token expiry tests."""

    def __init__(self, now: float = FIXED_NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_paper_doc(paper_id: str, owner_id: str, updated_at: int = 100, **extra: Any) -> Dict[str, Any]:
    """Raw paper document as the service stores it."""
    doc = {
        "_id": paper_id,
        "owner_id": owner_id,
        "created_at": min(updated_at, 100),
        "updated_at": updated_at,
        "deleted_at": None,
        "title": f"Paper {paper_id}",
    }
    doc.update(extra)
    return doc


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def jwt_manager(clock: FakeClock) -> JWTManager:
    """JWT manager with test secrets and a fixed clock."""
    return JWTManager(
        access=TokenConfig("test-access-secret", 3600),
        refresh=TokenConfig("test-refresh-secret", 2592000),
        resource=TokenConfig("test-paper-secret", 600),
        clock=clock,
    )


@pytest.fixture
def database() -> MemoryDatabase:
    return MemoryDatabase()


@pytest.fixture
def users(database: MemoryDatabase) -> MemoryCollection:
    return database["users"]


@pytest.fixture
def papers(database: MemoryDatabase) -> MemoryCollection:
    return database["papers"]


@pytest.fixture
def contents(database: MemoryDatabase) -> MemoryCollection:
    return database["paper_contents"]


@pytest.fixture
def permissions(users: MemoryCollection) -> PermissionService:
    return PermissionService(users)


@pytest.fixture
def identity_service(users: MemoryCollection, permissions: PermissionService) -> IdentityService:
    return IdentityService(users, permissions)


@pytest.fixture
def paper_service(
    papers: MemoryCollection,
    contents: MemoryCollection,
    permissions: PermissionService,
    jwt_manager: JWTManager,
) -> PaperService:
    return PaperService(papers, contents, permissions, jwt_manager, history_limit=3)


@pytest_asyncio.fixture
async def alice(users: MemoryCollection) -> User:
    """A GitHub-linked user."""
    user = User(
        id="64b000000000000000000001",
        created_at=1000,
        name="Alice",
        github_user={"id": 101, "login": "alice", "name": "Alice"},
    )
    await users.insert_one(to_doc(user))
    return user


@pytest_asyncio.fixture
async def bob(users: MemoryCollection) -> User:
    """A Google-linked user."""
    user = User(
        id="64b000000000000000000002",
        created_at=2000,
        name="Bob",
        google_user={"id": "g-202", "name": "Bob"},
    )
    await users.insert_one(to_doc(user))
    return user


@pytest.fixture
def paper_doc():
    """Factory for raw paper documents."""
    return make_paper_doc
