"""One ingestion run: ingest, deliver the digest, then mark it published."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Sequence
from zoneinfo import ZoneInfo

import structlog

from .config import FeedSource, GlobalConfig
from .engine import PublishedStore
from .errors import DeliveryError
from .logging_conf import feed_logger
from .notify import BaseNotifier, build_subject
from .orchestrator import IngestionReport, Orchestrator
from .scheduler import should_run


@dataclass(slots=True)
class RunSummary:
    feeds: int = 0
    failed_feeds: int = 0
    new_articles: int = 0
    delivered: bool = False
    subject: str | None = None
    skipped_reason: str | None = None


class Runner:
    """Glue between the ingestion core and its store and notifier."""

    def __init__(
        self,
        global_config: GlobalConfig,
        feeds: Sequence[FeedSource],
        store: PublishedStore,
        notifier: BaseNotifier,
        orchestrator: Orchestrator,
        logger: structlog.stdlib.BoundLogger,
        feed_log: Callable[[str], structlog.stdlib.BoundLogger] = feed_logger,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.global_config = global_config
        self.feeds = list(feeds)
        self.store = store
        self.notifier = notifier
        self.orchestrator = orchestrator
        self.logger = logger.bind(component="runner")
        self._feed_log = feed_log
        self._sleep = sleep
        self._clock = clock or (lambda: datetime.now(ZoneInfo(global_config.schedule.timezone)))

    def close(self) -> None:
        self.orchestrator.close()
        self.notifier.close()

    def run_once(
        self,
        cancel_event: threading.Event | None = None,
        *,
        dry_run: bool = False,
        respect_schedule: bool = False,
    ) -> RunSummary:
        target = self.global_config.delivery.target
        now = self._clock()
        if respect_schedule and not should_run(self.global_config.schedule, target, now):
            self.logger.info("run_skipped_outside_schedule", target=target, hour=now.hour)
            return RunSummary(feeds=len(self.feeds), skipped_reason="outside_schedule")

        report = self.orchestrator.ingest_all(
            self.feeds, self.store.is_published, cancel_event=cancel_event
        )
        self._log_failures(report)
        summary = RunSummary(
            feeds=len(report.outcomes),
            failed_feeds=len(report.failures),
            new_articles=len(report.articles),
        )
        if not report.articles:
            self.logger.info("nothing_new", feeds=summary.feeds, failed=summary.failed_feeds)
            return summary

        summary.subject = build_subject(len(report.articles), now)
        if dry_run:
            self.logger.info("dry_run_complete", new_articles=summary.new_articles)
            return summary

        self._deliver(report, summary.subject)
        self.store.mark_published(report.articles)
        summary.delivered = True
        self.logger.info("run_complete", new_articles=summary.new_articles, target=target)
        return summary

    def _log_failures(self, report: IngestionReport) -> None:
        for outcome in report.failures:
            self._feed_log(outcome.source.header).error(
                "feed_failed",
                url=outcome.source.url,
                error=str(outcome.error),
                error_type=type(outcome.error).__name__,
            )

    def _deliver(self, report: IngestionReport, subject: str) -> None:
        delivery = self.global_config.delivery
        last_error: DeliveryError | None = None
        for attempt in range(1, delivery.max_attempts + 1):
            try:
                self.notifier.send(report.articles, subject)
                return
            except DeliveryError as exc:
                last_error = exc
                self.logger.warning("delivery_failed", attempt=attempt, error=str(exc))
                if attempt < delivery.max_attempts:
                    self._sleep(delivery.backoff_seconds * attempt)
        self.logger.error("delivery_gave_up", attempts=delivery.max_attempts, error=str(last_error))
        raise DeliveryError(f"delivery failed after {delivery.max_attempts} attempts") from last_error


__all__ = ["Runner", "RunSummary"]
