"""HTTP fetching of feed documents with bounded transport retry."""

from __future__ import annotations

import threading
import time

import httpx
import structlog

from ..config import FeedSource, GlobalConfig
from ..errors import FetchCancelledError, FetchStatusError, FetchTransportError
from ..infra import UserAgentPool
from .records import RawFetchResult
from .retry import RetryPolicy

BASE_HEADERS = {
    "Accept": "application/rss+xml, application/atom+xml, application/xml, text/xml, */*",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
}
NAVIGATION_HEADERS = {
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
}


class Fetcher:
    """Download one feed per call; retries only on transport errors."""

    def __init__(
        self,
        global_config: GlobalConfig,
        ua_pool: UserAgentPool | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.global_config = global_config
        self.ua_pool = ua_pool or UserAgentPool(
            global_config.user_agents,
            contact=global_config.contact_email,
            homepage=global_config.homepage,
        )
        self.retry_policy = RetryPolicy.from_config(global_config.retry)
        self.timeout = global_config.request_timeout
        self.logger = logger or structlog.get_logger("headline_crawler.fetcher")
        self._client = httpx.Client(follow_redirects=True, timeout=self.timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def build_headers(self, source: FeedSource) -> dict[str, str]:
        headers = {"User-Agent": self.ua_pool.get(source.agent), **BASE_HEADERS}
        if source.enhanced_headers:
            headers.update(NAVIGATION_HEADERS)
        return headers

    def fetch(self, source: FeedSource, cancel_event: threading.Event | None = None) -> RawFetchResult:
        """Return the body of ``source``.

        Each attempt is bounded by ``request_timeout`` in total, body
        included. Raises ``FetchTransportError`` once the retry budget is
        spent, ``FetchStatusError`` on the first non-2xx answer and
        ``FetchCancelledError`` if ``cancel_event`` fires first.
        """

        cancel_event = cancel_event or threading.Event()
        headers = self.build_headers(source)
        policy = self.retry_policy
        attempt = 1
        while True:
            if cancel_event.is_set():
                raise FetchCancelledError(source.url)
            try:
                return self._attempt(source, headers)
            except httpx.TransportError as exc:
                if not policy.should_retry(attempt):
                    raise FetchTransportError(source.url, attempt) from exc
                delay = policy.delay_for(attempt)
                self.logger.warning(
                    "fetch_retry",
                    url=source.url,
                    attempt=attempt,
                    delay=delay,
                    error=str(exc),
                )
                if self._wait(cancel_event, delay):
                    raise FetchCancelledError(source.url) from exc
                attempt += 1

    def _attempt(self, source: FeedSource, headers: dict[str, str]) -> RawFetchResult:
        deadline = self._clock() + self.timeout
        with self._client.stream("GET", source.url, headers=headers, timeout=self.timeout) as response:
            if not response.is_success:
                raise FetchStatusError(source.url, response.status_code)
            chunks: list[bytes] = []
            for chunk in response.iter_bytes():
                if self._clock() > deadline:
                    raise httpx.ReadTimeout(
                        f"request exceeded {self.timeout}s", request=response.request
                    )
                chunks.append(chunk)
            return RawFetchResult(
                source=source,
                body=b"".join(chunks),
                url=str(response.url),
                status_code=response.status_code,
            )

    @staticmethod
    def _clock() -> float:
        return time.monotonic()

    @staticmethod
    def _wait(cancel_event: threading.Event, delay: float) -> bool:
        """Sleep for ``delay`` seconds; ``True`` when cancelled meanwhile."""

        return cancel_event.wait(delay)


__all__ = ["Fetcher", "BASE_HEADERS", "NAVIGATION_HEADERS"]
