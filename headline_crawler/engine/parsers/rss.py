"""RSS 2.0 channel parser."""

from __future__ import annotations

from ...config import FeedSource
from ..records import CanonicalArticle, build_guid
from ._feed import alternate_href, entry_text, load_entries


def parse_rss(body: bytes, source: FeedSource) -> list[CanonicalArticle]:
    """Normalise ``<channel><item>`` entries.

    Link priority is ``<link>``, then the alternate ``<atom:link href>``, then
    ``<guid>``. The identifier is ``<guid>`` or ``<itemID>``; without either
    the GUID falls back to the link.
    """

    articles: list[CanonicalArticle] = []
    for entry in load_entries(body):
        title = entry_text(entry, "title")
        guid = entry_text(entry, "id")
        link = entry_text(entry, "link") or alternate_href(entry) or guid
        if not title or not link:
            continue

        identifier = guid or entry_text(entry, "itemid")
        articles.append(
            CanonicalArticle(
                guid=build_guid(source.header, identifier, link),
                title=title,
                header=source.header,
                link=link,
            )
        )
    return articles


__all__ = ["parse_rss"]
