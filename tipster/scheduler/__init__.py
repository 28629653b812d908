"""Background job scheduling."""

from tipster.scheduler.manager import SchedulerManager, CLOCK_TICK_JOB

__all__ = ["SchedulerManager", "CLOCK_TICK_JOB"]
