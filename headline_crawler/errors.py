"""Exception hierarchy shared by the fetch, parse and delivery layers."""

from __future__ import annotations


class HeadlineCrawlerError(Exception):
    """Base class for all errors raised by headline_crawler."""


class ConfigError(HeadlineCrawlerError):
    """Configuration file is present but unusable."""


class FetchError(HeadlineCrawlerError):
    """A feed could not be retrieved."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{message}: {url}")
        self.url = url


class FetchTransportError(FetchError):
    """Transport failure (DNS, connect, timeout) that survived every retry."""

    def __init__(self, url: str, attempts: int) -> None:
        super().__init__(url, f"failed to make request after {attempts} attempts")
        self.attempts = attempts


class FetchStatusError(FetchError):
    """Server answered with a non-success status code; never retried."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(url, f"unexpected status code {status_code}")
        self.status_code = status_code


class FetchCancelledError(FetchError):
    """Run was cancelled before the feed finished downloading."""

    def __init__(self, url: str) -> None:
        super().__init__(url, "fetch cancelled")


class FeedParseError(HeadlineCrawlerError):
    """Feed body could not be decoded or is not well-formed XML."""


class EmptyFeedError(FeedParseError):
    """Feed parsed but yielded no qualifying articles."""


class DeliveryError(HeadlineCrawlerError):
    """Notification sink failed to deliver the digest."""


__all__ = [
    "ConfigError",
    "DeliveryError",
    "EmptyFeedError",
    "FeedParseError",
    "FetchCancelledError",
    "FetchError",
    "FetchStatusError",
    "FetchTransportError",
    "HeadlineCrawlerError",
]
