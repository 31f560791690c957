"""IssuePoller: discovers new issues mentioning the bot and forwards each one exactly once."""

import structlog

from sage.adapters.adapter import MessageCallback
from sage.adapters.chat_id import chat_id_for_issue
from sage.adapters.github_client import GitHubClient
from sage.schemas.message import Message
from sage.services.codespace import extract_codespace_url
from sage.services.processed_store import ProcessedIssueStore

logger = structlog.get_logger(__name__)

TRIGGER_MENTIONS = ("@stakwork", "@stakgraph")

_ISSUES_PER_POLL = 10


def mentions_trigger(body: str) -> bool:
    """Case-sensitive substring test, so ``@stakgraphxyz`` also matches."""
    return any(mention in body for mention in TRIGGER_MENTIONS)


class IssuePoller:
    """Polls one repository for open issues that mention a trigger and hands them to a callback.

    An issue is recorded in the store *before* the callback runs, so a failing
    callback never causes the issue to be forwarded again.
    """

    def __init__(self, client: GitHubClient, store: ProcessedIssueStore, owner: str, repo: str) -> None:
        self._client = client
        self._store = store
        self._owner = owner
        self._repo = repo

    @property
    def repository(self) -> str:
        return f"{self._owner}/{self._repo}"

    async def check_for_new_issues(self, callback: MessageCallback) -> list[int]:
        """Run one poll cycle and return the numbers of the issues forwarded in it.

        Errors from the GitHub API propagate; callback errors are logged per issue.
        """
        issues = await self._client.list_open_issues(self.repository, per_page=_ISSUES_PER_POLL)

        processed: list[int] = []
        for issue in issues:
            if issue.number in self._store:
                continue
            if not issue.body:
                continue
            if not mentions_trigger(issue.body):
                continue

            chat_id = chat_id_for_issue(issue.number)
            codespace_url = extract_codespace_url(issue.body)
            if codespace_url:
                message = Message(role="user", content=issue.body, codespace_url=codespace_url)
            else:
                message = Message(role="user", content=issue.body)

            logger.info(
                "issue_processing",
                repo=self.repository,
                issue=issue.number,
                codespace_url=codespace_url,
            )

            self._store.mark_processed(issue.number)
            processed.append(issue.number)

            try:
                await callback(chat_id, message)
            except Exception:
                logger.exception("issue_callback_failed", repo=self.repository, issue=issue.number)

        if processed:
            await self._store.save()
        return processed
