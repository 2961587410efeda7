"""Concurrent ingestion: fetch, parse and gate every feed, then merge in feed order."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Sequence

import structlog

from .config import FeedSource, GlobalConfig
from .engine import CanonicalArticle, Fetcher, PublishedCheck, parse_feed
from .errors import FetchCancelledError, HeadlineCrawlerError

FeedParser = Callable[[bytes, FeedSource], list[CanonicalArticle]]


@dataclass(slots=True)
class FeedOutcome:
    """Result slot of one feed: its unseen articles or the error that stopped it."""

    source: FeedSource
    articles: list[CanonicalArticle] = field(default_factory=list)
    error: Exception | None = None
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class IngestionReport:
    """Ordered, duplicate-free articles plus every per-feed outcome."""

    articles: list[CanonicalArticle]
    outcomes: list[FeedOutcome]

    @property
    def failures(self) -> list[FeedOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


class Orchestrator:
    """Fan out one fetch → parse → dedup pipeline per feed and fan back in."""

    def __init__(
        self,
        global_config: GlobalConfig,
        logger: structlog.stdlib.BoundLogger,
        fetcher: Fetcher | None = None,
        parser: FeedParser = parse_feed,
    ) -> None:
        self.global_config = global_config
        self.logger = logger.bind(component="orchestrator")
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or Fetcher(global_config, logger=logger)
        self.parser = parser

    def close(self) -> None:
        if self._owns_fetcher:
            self.fetcher.close()

    def ingest_all(
        self,
        sources: Sequence[FeedSource],
        is_published: PublishedCheck,
        *,
        cancel_event: threading.Event | None = None,
    ) -> IngestionReport:
        """Return the unseen articles of all ``sources`` in declaration order.

        Every feed runs concurrently and fails independently; a failed feed
        contributes nothing and is reported in ``IngestionReport.outcomes``.
        Articles whose GUID was already emitted by an earlier feed are dropped.
        """

        cancel_event = cancel_event or threading.Event()
        slots: list[FeedOutcome | None] = [None] * len(sources)
        if sources:
            # One thread per feed so no fetch queues behind another.
            with ThreadPoolExecutor(max_workers=len(sources), thread_name_prefix="feed") as executor:
                futures = [
                    executor.submit(self._process_feed, slots, index, source, is_published, cancel_event)
                    for index, source in enumerate(sources)
                ]
                wait(futures)

        outcomes = [
            slot if slot is not None else FeedOutcome(source=sources[index], error=RuntimeError("feed task did not run"))
            for index, slot in enumerate(slots)
        ]
        articles = merge_outcomes(outcomes)
        self.logger.info(
            "ingestion_complete",
            feeds=len(outcomes),
            failed=sum(1 for outcome in outcomes if not outcome.ok),
            articles=len(articles),
        )
        return IngestionReport(articles=articles, outcomes=outcomes)

    def _process_feed(
        self,
        slots: list[FeedOutcome | None],
        index: int,
        source: FeedSource,
        is_published: PublishedCheck,
        cancel_event: threading.Event,
    ) -> None:
        log = self.logger.bind(feed=source.header, url=source.url)
        outcome = FeedOutcome(source=source)
        try:
            raw = self.fetcher.fetch(source, cancel_event)
            parsed = self.parser(raw.body, source)
            if cancel_event.is_set():
                raise FetchCancelledError(source.url)
        except HeadlineCrawlerError as exc:
            outcome.error = exc
        except Exception as exc:  # noqa: BLE001
            log.exception("feed_crashed", error=str(exc))
            outcome.error = exc
        else:
            outcome.articles, outcome.skipped = self._filter_unpublished(parsed, is_published, log)
            log.debug("feed_ingested", parsed=len(parsed), unseen=len(outcome.articles))
        slots[index] = outcome

    @staticmethod
    def _filter_unpublished(
        articles: list[CanonicalArticle],
        is_published: PublishedCheck,
        log: structlog.stdlib.BoundLogger,
    ) -> tuple[list[CanonicalArticle], int]:
        unseen: list[CanonicalArticle] = []
        skipped = 0
        for article in articles:
            try:
                published = is_published(article.guid)
            except Exception as exc:  # noqa: BLE001
                # Unknown state: do not risk re-surfacing the article.
                log.error("dedup_check_failed", guid=article.guid, error=str(exc))
                skipped += 1
                continue
            if published:
                skipped += 1
                continue
            unseen.append(article)
        return unseen, skipped


def merge_outcomes(outcomes: Sequence[FeedOutcome]) -> list[CanonicalArticle]:
    """Concatenate successful outcomes in order, keeping the first of each GUID."""

    merged: list[CanonicalArticle] = []
    seen: set[str] = set()
    for outcome in outcomes:
        if not outcome.ok:
            continue
        for article in outcome.articles:
            if article.guid in seen:
                continue
            seen.add(article.guid)
            merged.append(article)
    return merged


def ingest_all(
    sources: Sequence[FeedSource],
    is_published: PublishedCheck,
    *,
    global_config: GlobalConfig,
    logger: structlog.stdlib.BoundLogger,
    fetcher: Fetcher | None = None,
    cancel_event: threading.Event | None = None,
) -> IngestionReport:
    """One-shot helper building a throwaway :class:`Orchestrator`."""

    orchestrator = Orchestrator(global_config, logger, fetcher=fetcher)
    try:
        return orchestrator.ingest_all(sources, is_published, cancel_event=cancel_event)
    finally:
        orchestrator.close()


__all__ = ["FeedOutcome", "IngestionReport", "Orchestrator", "ingest_all", "merge_outcomes"]
