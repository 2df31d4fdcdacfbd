"""Integration tests: sign-in, paper editing and paginated listing end to end."""

import httpx
import pytest

from paperdesk.config import Settings
from paperdesk.container import build_container
from paperdesk.errors import ErrorKind, ForbiddenError, InvalidInputError, PaperDeskError
from paperdesk.kernel.identity.providers import GithubProvider
from paperdesk.kernel.models.paper import CreatePaperInput, Paragraph, Text, UpdatePaperInput
from paperdesk.kernel.pagination.types import window_from_args
from paperdesk.logging_config import bind_request_context
from paperdesk.schemas.auth import CreateAccessTokenRequest
from paperdesk.schemas.common import ErrorResponse, paper_connection

GITHUB_USERS = {
    "alice-code": {"id": 1, "login": "alice", "name": "Alice"},
    "bob-code": {"id": 2, "login": "bob", "name": None},
}


def github_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/login/oauth/access_token":
        code = request.url.params["code"]
        if code not in GITHUB_USERS:
            return httpx.Response(200, json={"error": "bad_verification_code"})
        return httpx.Response(200, json={"access_token": f"token-{code}"})
    token = request.headers["Authorization"].split()[-1]
    return httpx.Response(200, json=GITHUB_USERS[token.removeprefix("token-")])


@pytest.fixture
def container():
    settings = Settings(
        environment="test",
        github_auth=[{"client_id": "web", "client_secret": "s3cret"}],
        paper_history_limit=2,
    )
    return build_container(
        settings=settings,
        github=GithubProvider(transport=httpx.MockTransport(github_handler)),
    )


async def sign_in(container, code: str) -> str:
    request = CreateAccessTokenRequest.model_validate({"github": {"client_id": "web", "code": code}})
    pair = await container.auth.create_access_token(request.to_input())
    payload = container.auth.authenticate(f"Bearer {pair.access_token}")
    return payload.sub


class TestPaperFlow:
    """End-to-end flows over the wired container."""

    @pytest.mark.asyncio
    async def test_sign_in_is_idempotent(self, container):
        first = await sign_in(container, "alice-code")
        second = await sign_in(container, "alice-code")
        bob = await sign_in(container, "bob-code")

        assert first == second
        assert bob != first
        assert (await container.identity.get_viewer(bob)).name == "bob"

    @pytest.mark.asyncio
    async def test_refresh_flow(self, container):
        request = CreateAccessTokenRequest.model_validate({"github": {"client_id": "web", "code": "alice-code"}})
        pair = await container.auth.create_access_token(request.to_input())

        refreshed = await container.auth.create_access_token(
            CreateAccessTokenRequest.model_validate(
                {"refresh_token": {"refresh_token": pair.refresh_token}}
            ).to_input()
        )

        assert container.jwt_manager.verify_access_token(refreshed.access_token).sub == (
            container.jwt_manager.verify_access_token(pair.access_token).sub
        )

    @pytest.mark.asyncio
    async def test_paginate_papers_through_connections(self, container):
        alice = await sign_in(container, "alice-code")

        created = []
        with bind_request_context(request_id="req-1", viewer_id=alice):
            for i in range(5):
                paper, _ = await container.papers.create_paper(alice, alice, CreatePaperInput(title=f"Paper {i}"))
                created.append(paper.id)

        seen = []
        after = None
        while True:
            window = window_from_args(after=after, first=2)
            connection = paper_connection(await container.papers.select_paper_page(alice, alice, window))
            assert connection.total == 5
            assert [edge.node for edge in connection.edges] == connection.nodes
            seen.extend(node.id for node in connection.nodes)
            if not connection.page_info.has_next_page:
                break
            after = connection.page_info.end_cursor

        assert seen == sorted(created)

        window = window_from_args(before=connection.page_info.start_cursor, last=2)
        back = paper_connection(await container.papers.select_paper_page(alice, alice, window))
        assert [node.id for node in back.nodes] == sorted(created)[2:4]

    @pytest.mark.asyncio
    async def test_edit_history_and_tokens(self, container):
        alice = await sign_in(container, "alice-code")
        bob = await sign_in(container, "bob-code")
        paper, _ = await container.papers.create_paper(alice, alice, CreatePaperInput(title="Notes"))

        for text in ["one", "two", "three", "four"]:
            await container.papers.update_paper(
                alice,
                alice,
                paper.id,
                UpdatePaperInput(content=[Paragraph(content=[Text(text=text)])]),
            )

        stored = await container.database["paper_contents"].find_one({"_id": paper.id})
        assert len(stored["history"]) == 2
        assert stored["revision"] == 4

        token = await container.papers.create_paper_token(alice, alice, paper.id)
        assert container.jwt_manager.verify_resource_token(token.token).read_only is None

        with pytest.raises(ForbiddenError) as exc_info:
            await container.papers.create_paper_token(bob, alice, paper.id)
        assert exc_info.value.to_response() == ErrorResponse(
            detail="You are not allowed to read this user",
            code="FORBIDDEN",
        )

    @pytest.mark.asyncio
    async def test_bad_requests_surface_error_kinds(self, container):
        with pytest.raises(InvalidInputError):
            CreateAccessTokenRequest().to_input()

        with pytest.raises(PaperDeskError) as exc_info:
            await sign_in(container, "unknown-code")

        assert exc_info.value.kind == ErrorKind.UNAUTHORIZED
        assert str(exc_info.value).startswith("UNAUTHORIZED: ")
