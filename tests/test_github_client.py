"""Tests for the GitHub client, using httpx's mock transport."""

import json

import httpx
import pytest

from coverdiff.exceptions import ChangesetFetchError, CommentError
from coverdiff.github import GithubClient

API = "https://api.github.com"


async def _run(handler, action):
    """Await ``action(client)`` against a client wired to ``handler``."""
    transport = httpx.MockTransport(handler)
    async with GithubClient("secret", "octo", "app", transport=transport) as client:
        return await action(client)


class TestListPullFiles:
    @pytest.mark.asyncio
    async def test_follows_pagination(self):
        seen = []

        def handler(request):
            seen.append(request)
            page = request.url.params.get("page", "1")
            if page == "1":
                next_url = f"{API}/repos/octo/app/pulls/7/files?per_page=100&page=2"
                return httpx.Response(
                    200,
                    json=[{"filename": "a.js"}, {"filename": "b.js"}],
                    headers={"Link": f'<{next_url}>; rel="next", <{next_url}>; rel="last"'},
                )
            return httpx.Response(200, json=[{"filename": "c/d.js"}])

        files = await _run(handler, lambda client: client.list_pull_files(7))

        assert [f["filename"] for f in files] == ["a.js", "b.js", "c/d.js"]
        assert len(seen) == 2
        assert seen[0].url.path == "/repos/octo/app/pulls/7/files"
        assert seen[0].url.params["per_page"] == "100"
        assert seen[0].headers["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_error_status_is_fatal(self):
        def handler(request):
            return httpx.Response(404, json={"message": "Not Found"})

        with pytest.raises(ChangesetFetchError) as exc:
            await _run(handler, lambda client: client.list_pull_files(7))
        assert exc.value.status_code == 404

    @pytest.mark.asyncio
    async def test_transport_error_is_fatal(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ChangesetFetchError) as exc:
            await _run(handler, lambda client: client.list_pull_files(7))
        assert exc.value.status_code is None
        assert "connection refused" in exc.value.reason

    @pytest.mark.asyncio
    async def test_missing_pr_number(self):
        def handler(request):
            raise AssertionError("no request expected")

        with pytest.raises(ChangesetFetchError):
            await _run(handler, lambda client: client.list_pull_files(None))

    @pytest.mark.asyncio
    async def test_no_retry(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(502)

        with pytest.raises(ChangesetFetchError):
            await _run(handler, lambda client: client.list_pull_files(7))
        assert len(calls) == 1


class TestUpsertComment:
    MARKER = "<!-- coverdiff-output -->"

    @pytest.mark.asyncio
    async def test_updates_existing_comment(self):
        requests = []

        def handler(request):
            requests.append(request)
            if request.method == "GET":
                return httpx.Response(200, json=[
                    {"id": 1, "body": "unrelated"},
                    {"id": 2, "body": f"{self.MARKER}\nold report"},
                ])
            return httpx.Response(200, json={"id": 2})

        comment_id = await _run(handler, lambda c: c.upsert_comment(7, "new body", self.MARKER))

        assert comment_id == 2
        assert requests[-1].method == "PATCH"
        assert requests[-1].url.path == "/repos/octo/app/issues/comments/2"
        assert json.loads(requests[-1].content) == {"body": "new body"}

    @pytest.mark.asyncio
    async def test_creates_comment_when_missing(self):
        requests = []

        def handler(request):
            requests.append(request)
            if request.method == "GET":
                return httpx.Response(200, json=[{"id": 1, "body": None}])
            return httpx.Response(201, json={"id": 9})

        comment_id = await _run(handler, lambda c: c.upsert_comment(7, "body", self.MARKER))

        assert comment_id == 9
        assert requests[-1].method == "POST"
        assert requests[-1].url.path == "/repos/octo/app/issues/7/comments"

    @pytest.mark.asyncio
    async def test_comment_failure(self):
        def handler(request):
            if request.method == "GET":
                return httpx.Response(200, json=[])
            return httpx.Response(403, json={"message": "Forbidden"})

        with pytest.raises(CommentError) as exc:
            await _run(handler, lambda c: c.upsert_comment(7, "body", self.MARKER))
        assert exc.value.status_code == 403

    @pytest.mark.asyncio
    async def test_find_comment_searches_all_pages(self):
        def handler(request):
            if request.url.params.get("page") == "2":
                return httpx.Response(200, json=[{"id": 5, "body": self.MARKER}])
            next_url = f"{API}/repos/octo/app/issues/7/comments?per_page=100&page=2"
            return httpx.Response(
                200, json=[{"id": 4, "body": "hi"}], headers={"Link": f'<{next_url}>; rel="next"'}
            )

        comment = await _run(handler, lambda c: c.find_comment(7, self.MARKER))
        assert comment["id"] == 5
