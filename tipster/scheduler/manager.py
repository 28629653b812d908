"""Scheduler manager for background jobs."""

import logging
from typing import Any, Callable, Optional
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from tipster.config import UK_TZ

logger = logging.getLogger(__name__)

CLOCK_TICK_JOB = "clock-tick"


class SchedulerManager:
    """Manages background job scheduling."""

    def __init__(self, tz: ZoneInfo = UK_TZ):
        self.tz = tz
        self.scheduler = AsyncIOScheduler(timezone=tz)
        self._started = False

    @property
    def running(self) -> bool:
        return self._started

    async def start(self) -> None:
        """Start the scheduler."""
        if not self._started:
            self.scheduler.start()
            self._started = True
            logger.info("Scheduler started")

    async def stop(self) -> None:
        """Stop the scheduler."""
        if self._started:
            self.scheduler.shutdown(wait=True)
            self._started = False
            logger.info("Scheduler stopped")

    def add_job(
        self,
        job_id: str,
        func: Callable,
        trigger_type: str = "interval",
        **trigger_kwargs
    ) -> None:
        """Add a job to the scheduler.

        Args:
            job_id: Unique identifier for the job
            func: The async function to run
            trigger_type: One of 'interval', 'cron', 'date'
            **trigger_kwargs: Arguments for the trigger
        """
        if trigger_type == "interval":
            trigger = IntervalTrigger(**trigger_kwargs)
        elif trigger_type == "cron":
            trigger_kwargs.setdefault("timezone", self.tz)
            trigger = CronTrigger(**trigger_kwargs)
        elif trigger_type == "date":
            trigger_kwargs.setdefault("timezone", self.tz)
            trigger = DateTrigger(**trigger_kwargs)
        else:
            raise ValueError(f"Unknown trigger type: {trigger_type}")

        self.scheduler.add_job(
            func,
            trigger,
            id=job_id,
            replace_existing=True,
            misfire_grace_time=60,
            coalesce=True,
        )
        logger.info(f"Added job: {job_id} with {trigger_type} trigger")

    def remove_job(self, job_id: str) -> None:
        """Remove a job from the scheduler."""
        if self.scheduler.get_job(job_id) is None:
            logger.warning(f"Could not remove job {job_id}: not scheduled")
            return
        self.scheduler.remove_job(job_id)
        logger.info(f"Removed job: {job_id}")

    def get_job(self, job_id: str) -> Optional[Any]:
        """Get a job by ID."""
        return self.scheduler.get_job(job_id)

    def get_jobs(self) -> list:
        """Get all scheduled jobs."""
        return self.scheduler.get_jobs()

    def setup_clock_tick(self, tick: Callable, seconds: int = 60) -> None:
        """Wake the live board periodically so the active day can roll over."""
        self.add_job(CLOCK_TICK_JOB, tick, trigger_type="interval", seconds=seconds)
