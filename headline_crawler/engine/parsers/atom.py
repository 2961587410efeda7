"""Reddit-flavoured Atom parser."""

from __future__ import annotations

from ...config import FeedSource
from ..links import resolve_outbound_link
from ..records import CanonicalArticle, build_guid
from ._feed import alternate_href, content_value, entry_text, load_entries


def parse_atom_reddit(body: bytes, source: FeedSource) -> list[CanonicalArticle]:
    """Normalise ``<feed><entry>`` entries.

    Reddit posts embed the submitted URL inside the HTML content; when an
    outbound anchor is present it replaces the entry's own comments link.
    """

    articles: list[CanonicalArticle] = []
    for entry in load_entries(body):
        title = entry_text(entry, "title")
        if not title:
            continue

        link = alternate_href(entry) or entry_text(entry, "link")
        external, found = resolve_outbound_link(content_value(entry))
        if found:
            link = external
        if not link:
            continue

        articles.append(
            CanonicalArticle(
                guid=build_guid(source.header, entry_text(entry, "id"), link),
                title=title,
                header=source.header,
                link=link,
            )
        )
    return articles


__all__ = ["parse_atom_reddit"]
