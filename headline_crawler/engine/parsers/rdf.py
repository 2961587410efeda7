"""Slashdot RSS 1.0 (RDF) parser."""

from __future__ import annotations

from html import unescape

from ...config import FeedSource
from ..records import CanonicalArticle
from ._feed import entry_text, load_entries


def parse_slashdot_rdf(body: bytes, source: FeedSource) -> list[CanonicalArticle]:
    articles: list[CanonicalArticle] = []
    for entry in load_entries(body):
        # Slashdot double-escapes entities in titles.
        title = unescape(entry_text(entry, "title")).strip()
        link = entry_text(entry, "link")
        if not title or not link:
            continue
        articles.append(CanonicalArticle(guid=link, title=title, header=source.header, link=link))
    return articles


__all__ = ["parse_slashdot_rdf"]
