"""Unit tests for the capability guard."""

from unittest.mock import AsyncMock

import pytest

from paperdesk.errors import ErrorKind, ForbiddenError, NotFoundError, StorageError, UnavailableError
from paperdesk.kernel.permissions.permission_service import Capability, PermissionService


class TestPermissionService:
    """Tests for PermissionService."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("capability", list(Capability))
    async def test_owner_holds_every_capability(self, permissions, alice, capability):
        owner = await permissions.check(capability, alice.id, alice.id)

        assert owner == alice

    @pytest.mark.asyncio
    @pytest.mark.parametrize("capability", list(Capability))
    async def test_other_viewer_is_forbidden(self, permissions, alice, bob, capability):
        with pytest.raises(ForbiddenError) as exc_info:
            await permissions.check(capability, bob.id, alice.id)

        assert exc_info.value.kind == ErrorKind.FORBIDDEN
        assert exc_info.value.message == f"You are not allowed to {capability.value} this user"

    @pytest.mark.asyncio
    async def test_unknown_owner_is_not_found(self, permissions, alice):
        with pytest.raises(NotFoundError):
            await permissions.can_read(alice.id, "no-such-user")

    @pytest.mark.asyncio
    async def test_wrappers(self, permissions, alice, bob):
        assert await permissions.can_read(alice.id, alice.id) == alice
        assert await permissions.can_write(alice.id, alice.id) == alice
        with pytest.raises(ForbiddenError):
            await permissions.can_administer(bob.id, alice.id)

    @pytest.mark.asyncio
    async def test_checks_are_idempotent(self, permissions, alice, bob, users):
        before = len(users)
        for _ in range(3):
            assert await permissions.allows(Capability.WRITE, alice.id, alice.id) is True
            assert await permissions.allows(Capability.WRITE, bob.id, alice.id) is False

        assert len(users) == before

    @pytest.mark.asyncio
    async def test_allows_propagates_not_found(self, permissions, alice):
        with pytest.raises(NotFoundError):
            await permissions.allows(Capability.READ, alice.id, "missing")

    @pytest.mark.asyncio
    async def test_storage_failure_is_unavailable(self):
        users = AsyncMock()
        users.find_one.side_effect = StorageError("timeout")

        with pytest.raises(UnavailableError):
            await PermissionService(users).can_read("a", "a")
