"""ProcessedIssueStore: JSON-file persistence of processed issue numbers and their webhooks.

The backing file maps decimal issue numbers to webhook URLs::

    {
      "12": "",
      "15": "https://example.com/hook"
    }

An empty string means the issue was processed but no webhook is known yet. Files
written by older releases hold a bare array of issue numbers (``[12, 15]``); they
are migrated to the mapping format on the next save.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


class ProcessedIssueStore:
    """In-memory issue-number → webhook mapping mirrored to a JSON file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._issues: dict[int, str] = {}
        self._save_lock = asyncio.Lock()

    @classmethod
    def for_repository(cls, data_dir: str | Path, owner: str, repo: str) -> "ProcessedIssueStore":
        return cls(cls.path_for(data_dir, owner, repo))

    @staticmethod
    def path_for(data_dir: str | Path, owner: str, repo: str) -> Path:
        return Path(data_dir) / f"github-{owner}-{repo}-processed-issues.json"

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Mapping access
    # ------------------------------------------------------------------

    def __contains__(self, issue_number: object) -> bool:
        return issue_number in self._issues

    def __len__(self) -> int:
        return len(self._issues)

    def mark_processed(self, issue_number: int) -> bool:
        """Record ``issue_number`` with an empty webhook. Returns False if it was already recorded."""
        if issue_number in self._issues:
            return False
        self._issues[issue_number] = ""
        return True

    def set_webhook(self, issue_number: int, webhook_url: str) -> None:
        self._issues[issue_number] = webhook_url

    def get_webhook(self, issue_number: int) -> str | None:
        return self._issues.get(issue_number)

    def snapshot(self) -> dict[int, str]:
        return dict(self._issues)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def ensure_data_dir(self) -> None:
        directory = self._path.parent
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            logger.info("data_dir_created", path=str(directory))

    async def load(self) -> dict[int, str]:
        """Replace the in-memory mapping with the file contents.

        Never raises: a missing file yields an empty mapping, and an unreadable
        or malformed file is logged and also yields an empty mapping.
        """
        try:
            self._issues = await asyncio.to_thread(self._read)
        except Exception:
            logger.error("processed_issues_load_failed", path=str(self._path), exc_info=True)
            self._issues = {}
        return self.snapshot()

    async def save(self) -> None:
        """Rewrite the backing file from the in-memory mapping. Errors are logged, not raised.

        Saves are serialised and the snapshot is taken once the lock is held, so the
        last save to finish always reflects the latest in-memory state.
        """
        async with self._save_lock:
            data = self._serialise()
            try:
                await asyncio.to_thread(self._write, data)
            except Exception:
                logger.error("processed_issues_save_failed", path=str(self._path), exc_info=True)
                return
        logger.info("processed_issues_saved", count=len(data))

    def save_blocking(self) -> None:
        """Synchronous ``save()`` for callers outside the event loop. Errors are logged, not raised."""
        data = self._serialise()
        try:
            self._write(data)
        except Exception:
            logger.error("processed_issues_save_failed", path=str(self._path), exc_info=True)
            return
        logger.info("processed_issues_saved", count=len(data))

    def _serialise(self) -> dict[str, str]:
        return {str(number): webhook for number, webhook in self._issues.items()}

    def _read(self) -> dict[int, str]:
        self.ensure_data_dir()
        if not self._path.exists():
            logger.info("processed_issues_not_found", path=str(self._path))
            return {}

        parsed = json.loads(self._path.read_text(encoding="utf-8"))
        if isinstance(parsed, list):
            issues = {int(number): "" for number in parsed}
            logger.info("processed_issues_loaded", count=len(issues), format="legacy")
            return issues
        if isinstance(parsed, dict):
            issues = {int(key): value or "" for key, value in parsed.items()}
            logger.info("processed_issues_loaded", count=len(issues), format="mapping")
            return issues
        raise ValueError(f"Unexpected processed issues content: {type(parsed).__name__}")

    def _write(self, data: dict[str, str]) -> None:
        # Sibling temp file, then an atomic rename over the target.
        self.ensure_data_dir()
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(json.dumps(data, indent=2))
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
