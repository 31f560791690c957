"""GitHubIssueAdapter: chat adapter backed by the issues of a single GitHub repository."""

import asyncio
from pathlib import Path

import structlog

from sage.adapters.adapter import MessageCallback, WebhookRegistry, noop_callback
from sage.adapters.chat_id import InvalidChatIdError, parse_issue_number
from sage.adapters.github_client import GitHubClient
from sage.schemas.message import Message
from sage.services.issue_poller import IssuePoller
from sage.services.periodic import PeriodicJob
from sage.services.processed_store import ProcessedIssueStore

logger = structlog.get_logger(__name__)

DEFAULT_POLL_INTERVAL = 10.0


class GitHubIssueAdapter:
    """Turns issues mentioning the bot into messages and replies with issue comments.

    Processed issues and their webhooks are kept in a ``ProcessedIssueStore``
    under ``data_dir``. Polling starts in ``initialize()`` and stops in ``close()``.
    Pass ``client`` to share or mock the HTTP client; it is closed by ``close()``
    either way. ``default_webhook_url`` answers webhook lookups for issues that
    have no webhook of their own yet.
    """

    def __init__(
        self,
        token: str | None,
        owner: str,
        repo: str,
        data_dir: str | Path = "./data",
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        dry_run: bool = False,
        default_webhook_url: str | None = None,
        client: GitHubClient | None = None,
    ) -> None:
        self._owner = owner
        self._repo = repo
        self._dry_run = dry_run
        self._default_webhook_url = default_webhook_url or None
        self._client = client or GitHubClient(token=token)
        self._store = ProcessedIssueStore.for_repository(data_dir, owner, repo)
        self._poller = IssuePoller(self._client, self._store, owner, repo)
        self._job = PeriodicJob(self.check_for_new_issues, interval=poll_interval, name=f"github_poll_{owner}_{repo}")
        self._callback: MessageCallback = noop_callback
        self._webhooks = WebhookRegistry()
        self._pending_saves: set[asyncio.Task[None]] = set()

    @property
    def repository(self) -> str:
        return f"{self._owner}/{self._repo}"

    @property
    def store(self) -> ProcessedIssueStore:
        return self._store

    @property
    def job(self) -> PeriodicJob:
        return self._job

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        logger.info("github_adapter_initializing", repo=self.repository, dry_run=self._dry_run)
        await asyncio.to_thread(self._store.ensure_data_dir)
        await self._store.load()
        self._job.start()

    async def close(self) -> None:
        await self._job.stop()
        if self._pending_saves:
            await asyncio.gather(*self._pending_saves, return_exceptions=True)
        await self._client.close()
        logger.info("github_adapter_closed", repo=self.repository)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def on_message_received(self, callback: MessageCallback) -> None:
        self._callback = callback

    async def check_for_new_issues(self) -> list[int]:
        return await self._poller.check_for_new_issues(self._callback)

    async def send_response(self, chat_id: str, message: Message) -> None:
        issue_number = parse_issue_number(chat_id)
        if issue_number is None:
            raise InvalidChatIdError(f"Invalid GitHub issue chat ID: {chat_id}")

        if self._dry_run:
            logger.info("github_comment_dry_run", repo=self.repository, issue=issue_number, body=message.content)
            return

        logger.info("github_comment_sending", repo=self.repository, issue=issue_number)
        await self._client.create_comment(self.repository, issue_number, message.content)

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    def store_webhook(self, chat_id: str, webhook_url: str) -> None:
        """Remember ``webhook_url`` for ``chat_id`` and persist it against the issue.

        Chat ids that do not reference an issue are kept in memory only.
        """
        self._webhooks.store(chat_id, webhook_url)
        issue_number = parse_issue_number(chat_id)
        if issue_number is None:
            logger.warning("webhook_store_invalid_chat_id", chat_id=chat_id)
            return
        self.store_webhook_for_issue(issue_number, webhook_url)

    def get_webhook(self, chat_id: str) -> str | None:
        issue_number = parse_issue_number(chat_id)
        if issue_number is None:
            logger.warning("webhook_lookup_invalid_chat_id", chat_id=chat_id)
            return self._webhooks.get(chat_id)
        return self.get_webhook_for_issue(issue_number) or self._webhooks.get(chat_id) or self._default_webhook_url

    def store_webhook_for_issue(self, issue_number: int, webhook_url: str) -> None:
        self._store.set_webhook(issue_number, webhook_url)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._store.save_blocking()
            return
        task = loop.create_task(self._store.save())
        self._pending_saves.add(task)
        task.add_done_callback(self._pending_saves.discard)

    def get_webhook_for_issue(self, issue_number: int) -> str | None:
        return self._store.get_webhook(issue_number)
