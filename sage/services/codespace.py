"""Extraction of GitHub Codespaces links from free-text issue bodies."""

import re

# https://<codespace>.github.dev[/path] or a forwarded port https://<codespace>-<port>.app.github.dev[/path]
_CODESPACE_URL_RE = re.compile(
    r"https://[a-z0-9](?:[a-z0-9-]*[a-z0-9])?(?:\.app)?\.github\.dev(?:/[^\s)\]>\"'`]*)?",
    re.IGNORECASE,
)


def extract_codespace_url(text: str | None) -> str | None:
    """Return the first Codespaces URL found in ``text``, or None."""
    if not text:
        return None
    match = _CODESPACE_URL_RE.search(text)
    return match.group(0) if match else None
