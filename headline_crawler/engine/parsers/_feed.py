"""feedparser front-end shared by the format parsers."""

from __future__ import annotations

import io
from typing import Any

import feedparser

from ...errors import FeedParseError


def load_entries(body: bytes) -> list[Any]:
    """Return the entries of ``body``; undecodable documents raise ``FeedParseError``."""

    # A file object keeps feedparser from treating the bytes as a path or URL.
    parsed = feedparser.parse(io.BytesIO(body))
    if parsed.bozo and not parsed.entries:
        raise FeedParseError(f"malformed feed: {parsed.get('bozo_exception')}")
    return parsed.entries


def entry_text(entry: Any, key: str) -> str:
    value = entry.get(key)
    return value.strip() if isinstance(value, str) else ""


def alternate_href(entry: Any) -> str:
    """``href`` of the entry's alternate link, else of its first link."""

    fallback = ""
    for link in entry.get("links") or []:
        href = (link.get("href") or "").strip()
        if not href:
            continue
        if link.get("rel") in (None, "", "alternate"):
            return href
        fallback = fallback or href
    return fallback


def content_value(entry: Any) -> str:
    content = entry.get("content") or []
    if not content:
        return ""
    return content[0].get("value") or ""


__all__ = ["alternate_href", "content_value", "entry_text", "load_entries"]
