"""HTTP adapter for the GitHub REST API v3."""

from typing import Any

import httpx

from sage.adapters.github_models import GitHubComment, GitHubIssue


class GitHubClientError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    _BASE_URL = "https://api.github.com"

    def __init__(self, token: str | None = None, base_url: str | None = None) -> None:
        headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._http = httpx.AsyncClient(base_url=base_url or self._BASE_URL, headers=headers)

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        if not self._http.is_closed:
            await self._http.aclose()

    async def list_open_issues(self, repo: str, per_page: int = 10) -> list[GitHubIssue]:
        """Fetch the most recently created open issues of a repository.

        Args:
            repo: Repository in ``owner/repo`` format, e.g. ``stakwork/sphinx-tribes``.
            per_page: Page size; only the first page is requested.

        Returns:
            Issues sorted by creation time, newest first.

        Raises:
            GitHubClientError: On any non-2xx response or an unexpected body shape.
        """
        resp = await self._http.get(
            f"/repos/{repo}/issues",
            params={
                "state": "open",
                "sort": "created",
                "direction": "desc",
                "per_page": per_page,
            },
        )
        self._raise_for_status(resp)
        items = resp.json()
        if not isinstance(items, list):
            raise GitHubClientError(
                f"GitHub returned unexpected shape, expected array, got {type(items).__name__}",
                status_code=resp.status_code,
            )
        return [self._to_issue(item) for item in items]

    async def create_comment(self, repo: str, number: int, body: str) -> GitHubComment:
        """Post ``body`` verbatim as a new comment on issue ``number``."""
        resp = await self._http.post(f"/repos/{repo}/issues/{number}/comments", json={"body": body})
        self._raise_for_status(resp)
        data = resp.json()
        return GitHubComment(id=data["id"], body=data.get("body") or "", html_url=data.get("html_url"))

    @staticmethod
    def _to_issue(data: dict[str, Any]) -> GitHubIssue:
        return GitHubIssue(
            number=data["number"],
            title=data.get("title") or "",
            body=data.get("body"),
            labels=[label["name"] for label in data.get("labels", [])],
            created_at=data.get("created_at"),
            html_url=data.get("html_url"),
        )

    def _raise_for_status(self, resp: httpx.Response) -> None:
        if resp.is_error:
            raise GitHubClientError(
                f"GitHub API error {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )
