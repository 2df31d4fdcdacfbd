"""Unit tests for the error taxonomy."""

import pytest

from paperdesk.errors import (
    ErrorKind,
    ForbiddenError,
    NotFoundError,
    StorageError,
    UnavailableError,
    UnknownError,
    storage_errors,
)


class TestPaperDeskError:
    """Tests for error kinds and rendering."""

    def test_str_includes_kind_and_message(self):
        assert str(NotFoundError("Paper not found")) == "NOT_FOUND: Paper not found"
        assert str(UnknownError()) == "UNKNOWN: None"

    def test_only_unavailable_is_retryable(self):
        assert UnavailableError("down").retryable is True
        assert ForbiddenError("no").retryable is False

    def test_to_response_uses_kind_as_code(self):
        response = ForbiddenError("You are not allowed to read this user").to_response()

        assert response.code == "FORBIDDEN"
        assert response.detail == "You are not allowed to read this user"

    def test_to_response_without_message(self):
        assert NotFoundError().to_response().detail == ErrorKind.NOT_FOUND.value


class TestStorageErrors:
    """Tests for the storage_errors context manager."""

    @pytest.mark.parametrize("exc", [StorageError("boom"), ConnectionError("reset"), TimeoutError("slow")])
    def test_store_failures_become_unavailable(self, exc):
        with pytest.raises(UnavailableError) as exc_info:
            with storage_errors("find papers"):
                raise exc

        assert exc_info.value.kind == ErrorKind.UNAVAILABLE
        assert exc_info.value.message.startswith("find papers failed")
        assert exc_info.value.__cause__ is exc

    def test_other_errors_propagate_unchanged(self):
        with pytest.raises(KeyError):
            with storage_errors("find papers"):
                raise KeyError("x")
