"""Scheduling helpers."""

from .apsched_adapter import APSchedulerAdapter, should_run, within_schedule

__all__ = ["APSchedulerAdapter", "should_run", "within_schedule"]
