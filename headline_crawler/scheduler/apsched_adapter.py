"""APScheduler wrapper and run-window gating."""

from __future__ import annotations

from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from ..config import ScheduleConfig
from ..logging_conf import configure_logging

RUN_JOB_ID = "headlines::run"


def within_schedule(schedule: ScheduleConfig, now: datetime | None = None) -> bool:
    """Return whether ``now`` falls in one of the configured hours."""

    tz = ZoneInfo(schedule.timezone)
    local = (now or datetime.now(tz)).astimezone(tz)
    return local.hour in schedule.hours


def should_run(schedule: ScheduleConfig, target: str, now: datetime | None = None) -> bool:
    """Gated targets run only inside the window; others run whenever invoked."""

    if target not in schedule.gated_targets:
        return True
    return within_schedule(schedule, now)


class APSchedulerAdapter:
    """Run the ingestion job at the configured hours."""

    def __init__(self, schedule: ScheduleConfig, blocking: bool = False) -> None:
        self.schedule = schedule
        self.scheduler: BaseScheduler = BlockingScheduler() if blocking else BackgroundScheduler()
        self.logger = configure_logging().bind(component="scheduler")
        self.started = False

    def start(self) -> None:
        if not self.started:
            self.started = True
            self.logger.info("apscheduler_started")
            self.scheduler.start()

    def shutdown(self) -> None:
        if self.started:
            self.scheduler.shutdown(wait=False)
            self.started = False
            self.logger.info("apscheduler_stopped")

    def schedule_run(self, callback: Callable[[], object]) -> None:
        trigger = self._build_trigger()
        # replace_existing is only honoured once the scheduler is running.
        if self.scheduler.get_job(RUN_JOB_ID) is not None:
            self.scheduler.remove_job(RUN_JOB_ID)
        self.scheduler.add_job(callback, trigger=trigger, id=RUN_JOB_ID, replace_existing=True)
        self.logger.info("job_scheduled", schedule=self.schedule.model_dump())

    def _build_trigger(self) -> CronTrigger:
        hours = ",".join(str(hour) for hour in self.schedule.hours)
        return CronTrigger(hour=hours, minute=0, timezone=self.schedule.timezone)

    def list_jobs(self) -> list[dict]:
        jobs = []
        for job in self.scheduler.get_jobs():
            jobs.append(
                {
                    "id": job.id,
                    "next_run_time": getattr(job, "next_run_time", None),
                    "trigger": str(job.trigger),
                }
            )
        return jobs


__all__ = ["APSchedulerAdapter", "should_run", "within_schedule"]
