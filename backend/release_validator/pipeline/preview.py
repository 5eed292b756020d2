"""
Preview environment discovery from review request comments.

The deployment bot announces each preview in a comment.  The URL is
taken from a ``[Preview](https://...)`` link when present, otherwise
from the first bare ``https://<name>.vercel.app`` address.
"""

from __future__ import annotations

import re
from typing import Any, Iterable

LABELED_LINK_RE = re.compile(r"\[Preview\]\((https://[^)]+)\)")
BARE_HOST_RE = re.compile(r"(https://[^.\s]+\.vercel\.app[^\s)]*)", re.IGNORECASE)


def extract_preview_url(body: str) -> str | None:
    """First-match-wins: labeled link, then bare hostname."""
    for pattern in (LABELED_LINK_RE, BARE_HOST_RE):
        match = pattern.search(body)
        if match:
            return match.group(1)
    return None


def find_preview_url(comments: Iterable[dict[str, Any]], bot_login: str) -> str | None:
    """Scan comments in order for a bot-authored preview announcement."""
    for comment in comments:
        body = comment.get("body")
        if comment.get("user") != bot_login or not body:
            continue
        url = extract_preview_url(body)
        if url:
            return url
    return None
