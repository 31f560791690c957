"""Conversion between GitHub issue numbers and chat ids (``github-issue-<n>``)."""

import re

CHAT_ID_PREFIX = "github-issue"

_CHAT_ID_RE = re.compile(rf"{CHAT_ID_PREFIX}-([0-9]+)")


class InvalidChatIdError(ValueError):
    """Raised when a chat id does not reference a GitHub issue."""


def chat_id_for_issue(issue_number: int) -> str:
    return f"{CHAT_ID_PREFIX}-{issue_number}"


def parse_issue_number(chat_id: str) -> int | None:
    """Return the issue number encoded in ``chat_id``, or None if it is not a GitHub issue chat id."""
    match = _CHAT_ID_RE.fullmatch(chat_id)
    if match is None:
        return None
    return int(match.group(1))
