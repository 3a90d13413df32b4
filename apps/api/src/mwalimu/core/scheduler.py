"""
Background Job Scheduler

Periodic maintenance work on APScheduler's asyncio scheduler.

A JobScheduler is created by the application lifespan and kept on
app.state. Modules register their jobs on it before start(); a listener logs
every run, and a failing run never stops the scheduler. Registered jobs can
also be run on demand from the development debug endpoints.

Usage:
    jobs = JobScheduler()
    jobs.register("my_job", my_job, IntervalTrigger(hours=1))
    jobs.start()
    ...
    jobs.shutdown()
"""

import logging
from collections.abc import Callable, Coroutine
from datetime import UTC, datetime
from typing import Any

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.base import BaseTrigger

logger = logging.getLogger(__name__)

JobFunc = Callable[[], Coroutine[Any, Any, None]]

JOB_DEFAULTS = {
    "coalesce": True,  # one catch-up run after a pause, not one per missed tick
    "max_instances": 1,
    "misfire_grace_time": 300,
}


def _log_job_event(event: JobExecutionEvent) -> None:
    if event.exception:
        logger.error(f"Scheduled job {event.job_id} raised: {event.exception}", exc_info=event.exception)
    else:
        logger.info(f"Scheduled job {event.job_id} finished")


class JobScheduler:
    """Registry of background jobs plus the scheduler that runs them."""

    def __init__(self, timezone: str = "UTC"):
        self._jobs: dict[str, tuple[JobFunc, BaseTrigger]] = {}
        self._scheduler = AsyncIOScheduler(timezone=timezone, job_defaults=JOB_DEFAULTS)
        self._scheduler.add_listener(_log_job_event, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def register(self, job_id: str, func: JobFunc, trigger: BaseTrigger) -> None:
        """Register a job; it is scheduled at once if the scheduler already runs."""
        self._jobs[job_id] = (func, trigger)
        if self.running:
            self._scheduler.add_job(func, trigger=trigger, id=job_id, replace_existing=True)
        logger.info(f"Registered job: {job_id}")

    def start(self) -> None:
        """Schedule every registered job and start the scheduler. Must run inside the event loop."""
        if self.running:
            logger.warning("Scheduler already running")
            return

        for job_id, (func, trigger) in self._jobs.items():
            self._scheduler.add_job(func, trigger=trigger, id=job_id, replace_existing=True)
        self._scheduler.start()
        logger.info(f"Scheduler started with {len(self._jobs)} job(s)")

    def shutdown(self) -> None:
        """Stop the scheduler, letting running jobs finish."""
        if not self.running:
            return
        self._scheduler.shutdown(wait=True)
        logger.info("Scheduler stopped")

    async def run_now(self, job_id: str) -> dict[str, Any]:
        """
        Run a registered job immediately, outside its schedule.

        Returns:
            {"job_id", "status", "executed_at"} plus "error" when the run failed

        Raises:
            KeyError: If no job with this id is registered
        """
        if job_id not in self._jobs:
            raise KeyError(job_id)

        func, _ = self._jobs[job_id]
        result: dict[str, Any] = {
            "job_id": job_id,
            "status": "success",
            "executed_at": datetime.now(UTC).isoformat(),
        }

        logger.info(f"Running job {job_id} on demand")
        try:
            await func()
        except Exception as e:
            logger.error(f"On-demand run of {job_id} failed: {e}", exc_info=True)
            result.update(status="error", error=str(e))
        return result

    def describe(self) -> list[dict[str, Any]]:
        """Registered job ids with their next run time (None until scheduled)."""
        described = []
        for job_id in self._jobs:
            job = self._scheduler.get_job(job_id) if self.running else None
            next_run = job.next_run_time.isoformat() if job and job.next_run_time else None
            described.append({"job_id": job_id, "next_run_time": next_run})
        return described

    @property
    def job_ids(self) -> list[str]:
        return list(self._jobs)
