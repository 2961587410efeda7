"""HTML digest rendering with minimal escaping."""

from __future__ import annotations

from datetime import datetime
from html import escape
from typing import Iterable

from ..engine import CanonicalArticle

SEPARATOR = '<hr class="separator" style="border:none;border-top:2px dashed #ccc;margin:16px 0;">'

_DOCUMENT = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{subject}</title>
</head>
<body style="font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,Arial,Helvetica,sans-serif;font-size:18px;line-height:1.4;">
{body}
</body>
</html>"""


def build_subject(count: int, now: datetime) -> str:
    return f"\U0001fad6 Headlines ({count}) {now.hour}h"


def format_digest_item(article: CanonicalArticle) -> str:
    parts = []
    if article.header:
        parts.append(f"<b>{escape(article.header)}</b>:")
    parts.append(escape(article.title))
    return (
        '<p class="item" style="color:#000000;margin:0;">'
        f'<a href="{escape(article.link)}" style="color:#000000;text-decoration:none;">'
        f"{' '.join(parts)}</a></p>"
    )


def build_digest_html(articles: Iterable[CanonicalArticle], subject: str) -> str:
    items = [format_digest_item(article) for article in articles]
    body = SEPARATOR + SEPARATOR.join(items) + SEPARATOR
    return _DOCUMENT.format(subject=escape(subject), body=body)


# Bot API limit for one message body.
TELEGRAM_MESSAGE_LIMIT = 4096


def format_telegram_item(article: CanonicalArticle) -> str:
    label = f"<b>{escape(article.header)}</b>: " if article.header else ""
    return f'{label}<a href="{escape(article.link)}">{escape(article.title)}</a>'


def build_telegram_messages(
    articles: Iterable[CanonicalArticle], subject: str, limit: int = TELEGRAM_MESSAGE_LIMIT
) -> list[str]:
    """Pack the subject and items, in order, into as few messages as fit ``limit``."""

    messages: list[str] = []
    current = f"<b>{escape(subject)}</b>"
    for item in (format_telegram_item(article) for article in articles):
        candidate = f"{current}\n\n{item}"
        if len(candidate) > limit:
            messages.append(current)
            current = item
        else:
            current = candidate
    messages.append(current)
    return messages


__all__ = [
    "TELEGRAM_MESSAGE_LIMIT",
    "build_digest_html",
    "build_subject",
    "build_telegram_messages",
    "format_digest_item",
    "format_telegram_item",
]
