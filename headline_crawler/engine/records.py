"""Value objects passed between fetch, parse and aggregation stages."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config import FeedSource


@dataclass(frozen=True, slots=True)
class CanonicalArticle:
    """Normalised article shared by every feed format."""

    guid: str
    title: str
    header: str
    link: str


@dataclass(slots=True)
class RawFetchResult:
    """Response body of one feed, consumed by the matching parser."""

    source: FeedSource
    body: bytes = field(repr=False)
    url: str = ""
    status_code: int = 200


def build_guid(header: str, identifier: str, link: str) -> str:
    """Synthesize the canonical GUID.

    A stable identifier is namespaced with the space-stripped header. Without
    one the resolved link is used verbatim, un-prefixed, so that the identity
    survives a header rename.
    """

    if identifier:
        normalized = header.replace(" ", "")
        return f"{normalized}:{identifier}" if normalized else identifier
    return link


__all__ = ["CanonicalArticle", "RawFetchResult", "build_guid"]
