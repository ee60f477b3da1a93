"""Async GitHub REST client for pull request files and the coverage comment.

Every call is made once: errors are turned into coverdiff exceptions and
propagate to the caller, which ends the run.
"""

from typing import Any, Dict, List, Optional

import httpx

from ..exceptions import ChangesetFetchError, CommentError
from ..logging_config import get_logger
from ..paths import ChangesetLister

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.github.com"
PER_PAGE = 100


class GithubClient(ChangesetLister):
    """GitHub API access for one repository.

    Usage::

        async with GithubClient(token, "octo", "app") as client:
            files = await client.list_pull_files(42)
            await client.upsert_comment(42, body, marker)
    """

    def __init__(
        self,
        token: Optional[str],
        owner: str,
        repo: str,
        api_url: str = DEFAULT_API_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            headers=self._get_headers(token),
            transport=transport,
            timeout=20.0,
        )

    @staticmethod
    def _get_headers(token: Optional[str]) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def __aenter__(self) -> "GithubClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    # ── Pull request files ───────────────────────────────────────────────

    async def list_pull_files(self, pr_number: Optional[int]) -> List[Dict[str, Any]]:
        """All files of the pull request, following every result page.

        Raises:
            ChangesetFetchError: On a missing PR number, a transport error, or
                a non-success response.
        """
        url = f"{self.repo_path}/pulls/{pr_number}/files"
        if not pr_number:
            raise ChangesetFetchError(url, "no pull request number in context")

        files: List[Dict[str, Any]] = []
        async for page in self._paginate(url, ChangesetFetchError):
            files.extend(page)
        logger.debug("Fetched %d pull request file record(s)", len(files))
        return files

    # ── Coverage comment ─────────────────────────────────────────────────

    async def find_comment(self, pr_number: int, marker: str) -> Optional[Dict[str, Any]]:
        """First issue comment on the pull request whose body contains marker."""
        url = f"{self.repo_path}/issues/{pr_number}/comments"
        async for page in self._paginate(url, CommentError):
            for comment in page:
                if marker in (comment.get("body") or ""):
                    return comment
        return None

    async def upsert_comment(self, pr_number: int, body: str, marker: str) -> int:
        """Update our previous comment, or create one. Returns the comment id."""
        existing = await self.find_comment(pr_number, marker)
        if existing is not None:
            url = f"{self.repo_path}/issues/comments/{existing['id']}"
            response = await self._send(CommentError, "PATCH", url, json={"body": body})
            logger.info("Updated coverage comment %s", existing["id"])
        else:
            url = f"{self.repo_path}/issues/{pr_number}/comments"
            response = await self._send(CommentError, "POST", url, json={"body": body})
            logger.info("Created coverage comment on #%s", pr_number)
        return response.json()["id"]

    # ── Transport helpers ────────────────────────────────────────────────

    async def _paginate(self, url: str, error_cls: type):
        """Yield each JSON page of a list endpoint, following Link headers."""
        next_url: Optional[str] = url
        params: Optional[Dict[str, Any]] = {"per_page": PER_PAGE}
        while next_url:
            response = await self._send(error_cls, "GET", next_url, params=params)
            logger.debug("GET %s -> %d", response.request.url, response.status_code)
            yield response.json()
            # The next link already carries the query string.
            next_url = response.links.get("next", {}).get("url")
            params = None

    async def _send(self, error_cls: type, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise self._error(error_cls, url, str(e))

        if response.is_error:
            reason = response.reason_phrase or "request failed"
            raise self._error(error_cls, url, reason, response.status_code)
        return response

    @staticmethod
    def _error(error_cls: type, url: str, reason: str, status_code: Optional[int] = None):
        if error_cls is ChangesetFetchError:
            return ChangesetFetchError(url, reason, status_code)
        return CommentError(f"{reason} ({url})", status_code)
