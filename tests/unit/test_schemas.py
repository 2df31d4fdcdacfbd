"""Unit tests for transport schemas."""

import pytest

from paperdesk.errors import InvalidInputError
from paperdesk.kernel.identity.auth_service import (
    GithubCodeInput,
    GoogleAccessTokenInput,
    GoogleCodeInput,
    RefreshTokenInput,
)
from paperdesk.kernel.models.paper import Paper
from paperdesk.kernel.pagination.cursor import PaperCursor
from paperdesk.kernel.pagination.types import PageResult
from paperdesk.schemas.auth import CreateAccessTokenRequest
from paperdesk.schemas.common import paper_connection


def make_paper(paper_id: str) -> Paper:
    return Paper(id=paper_id, owner_id="u1", created_at=1, updated_at=2)


class TestCreateAccessTokenRequest:
    """Tests for CreateAccessTokenRequest.to_input."""

    @pytest.mark.parametrize(
        "body,expected",
        [
            ({"github": {"client_id": "c", "code": "x"}}, GithubCodeInput("c", "x")),
            ({"google": {"client_id": "c", "code": "x"}}, GoogleCodeInput("c", "x")),
            ({"google_access_token": {"access_token": "t"}}, GoogleAccessTokenInput("t")),
            ({"refresh_token": {"refresh_token": "r"}}, RefreshTokenInput("r")),
        ],
    )
    def test_exactly_one_member(self, body, expected):
        assert CreateAccessTokenRequest.model_validate(body).to_input() == expected

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {
                "github": {"client_id": "c", "code": "x"},
                "refresh_token": {"refresh_token": "r"},
            },
        ],
    )
    def test_none_or_many_members_is_invalid(self, body):
        with pytest.raises(InvalidInputError):
            CreateAccessTokenRequest.model_validate(body).to_input()


class TestPaperConnection:
    """Tests for connection building."""

    def test_edges_carry_cursors(self):
        page = PageResult[Paper](items=[make_paper("p1"), make_paper("p2")], total=9, has_next_page=True)

        connection = paper_connection(page)

        assert [edge.cursor for edge in connection.edges] == [
            PaperCursor(id="p1").encode(),
            PaperCursor(id="p2").encode(),
        ]
        assert connection.page_info.start_cursor == connection.edges[0].cursor
        assert connection.page_info.end_cursor == connection.edges[1].cursor
        assert connection.page_info.has_next_page is True
        assert connection.total == 9
        assert [node.id for node in connection.nodes] == ["p1", "p2"]

    def test_empty_page(self):
        connection = paper_connection(PageResult[Paper](items=[], total=0))

        assert connection.edges == []
        assert connection.page_info.start_cursor is None
        assert connection.page_info.end_cursor is None
