from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from sage.adapters.github_client import GitHubClient
from sage.adapters.github_models import GitHubIssue
from sage.services.processed_store import ProcessedIssueStore

OWNER = "stakwork"
REPO = "hive"
GITHUB_API = "https://api.github.com"
ISSUES_PATH = f"/repos/{OWNER}/{REPO}/issues"


def issue_payload(number: int, body: str | None, title: str = "An issue") -> dict[str, Any]:
    """A trimmed-down issue object as returned by ``GET /repos/{owner}/{repo}/issues``."""
    return {
        "number": number,
        "title": title,
        "body": body,
        "labels": [{"name": "bug"}],
        "created_at": "2026-10-01T12:00:00Z",
        "html_url": f"https://github.com/{OWNER}/{REPO}/issues/{number}",
    }


def make_issue(number: int, body: str | None) -> GitHubIssue:
    return GitHubIssue(number=number, title=f"Issue {number}", body=body)


@pytest.fixture
def store(tmp_path: Path) -> ProcessedIssueStore:
    return ProcessedIssueStore.for_repository(tmp_path / "data", OWNER, REPO)


@pytest.fixture
def fake_client() -> AsyncMock:
    client = AsyncMock(spec=GitHubClient)
    client.list_open_issues.return_value = []
    return client
