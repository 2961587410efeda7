"""Format-specific feed parsers selected by the feed's static format tag."""

from __future__ import annotations

from typing import Callable

from ...config import FeedFormat, FeedSource
from ...errors import EmptyFeedError
from ..records import CanonicalArticle
from .atom import parse_atom_reddit
from .rdf import parse_slashdot_rdf
from .rss import parse_rss

FeedParserFn = Callable[[bytes, FeedSource], list[CanonicalArticle]]

PARSERS: dict[FeedFormat, FeedParserFn] = {
    FeedFormat.RSS: parse_rss,
    FeedFormat.ATOM_REDDIT: parse_atom_reddit,
    FeedFormat.SLASHDOT_RDF: parse_slashdot_rdf,
}


def parse_feed(body: bytes, source: FeedSource) -> list[CanonicalArticle]:
    """Parse ``body`` with the parser registered for ``source.format``.

    Raises ``FeedParseError`` when the document cannot be decoded and
    ``EmptyFeedError`` when nothing in it qualifies as an article.
    """

    articles = PARSERS[source.format](body, source)
    if not articles:
        raise EmptyFeedError(f"no articles found in feed: {source.url}")
    return articles


__all__ = ["PARSERS", "parse_feed", "parse_rss", "parse_atom_reddit", "parse_slashdot_rdf"]
