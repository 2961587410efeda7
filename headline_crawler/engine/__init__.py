"""Engine components: fetch → parse → dedup."""

from .dedup import PublishedCheck, PublishedStore
from .fetcher import Fetcher
from .links import resolve_outbound_link
from .parsers import parse_feed
from .records import CanonicalArticle, RawFetchResult, build_guid
from .retry import RetryPolicy

__all__ = [
    "CanonicalArticle",
    "Fetcher",
    "PublishedCheck",
    "PublishedStore",
    "RawFetchResult",
    "RetryPolicy",
    "build_guid",
    "parse_feed",
    "resolve_outbound_link",
]
