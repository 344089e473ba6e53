"""
Background Job Scheduler

Provides scheduled task execution using APScheduler with AsyncIO support.
Handles job registration, execution, and graceful shutdown.

Design Principles:
- Jobs are idempotent (safe to run multiple times)
- At most one instance of a job runs at a time; a tick that arrives while
  the previous run is still executing is skipped
- Failed jobs are logged but don't crash the scheduler
- Jobs can be triggered manually for testing
- Scheduler integrates with FastAPI lifespan

Usage:
    from schoolcms.core.scheduler import register_job, start_scheduler, stop_scheduler

    # Register before starting:
    register_job("my_job", my_job, IntervalTrigger(hours=1))

    # In FastAPI lifespan:
    async def lifespan(app):
        await start_scheduler()
        yield
        await stop_scheduler()
"""

import copy
import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.base import BaseTrigger

from schoolcms.core.clock import utc_now
from schoolcms.core.config import settings

logger = logging.getLogger(__name__)

JobFunc = Callable[[], Coroutine[Any, Any, Any]]


@dataclass
class RegisteredJob:
    """A job known to the application, scheduled or not."""

    job_id: str
    func: JobFunc
    trigger: BaseTrigger


# Global scheduler instance
_scheduler: AsyncIOScheduler | None = None

# Job registry for scheduling and manual triggering
_job_registry: dict[str, RegisteredJob] = {}


class SchedulerConfig:
    """Configuration for the background scheduler."""

    # Job execution settings
    JOB_COALESCE = True  # Combine multiple missed executions into one
    JOB_MAX_INSTANCES = 1  # Only one instance of each job can run at a time
    JOB_MISFIRE_GRACE_TIME = 60 * 5  # 5 minutes grace time for missed jobs

    EXECUTORS = {
        "default": {"type": "asyncio"},
    }

    JOB_DEFAULTS = {
        "coalesce": JOB_COALESCE,
        "max_instances": JOB_MAX_INSTANCES,
        "misfire_grace_time": JOB_MISFIRE_GRACE_TIME,
    }


def _job_listener(event: JobExecutionEvent) -> None:
    """
    Listener for job execution events.

    Logs job execution results for monitoring and debugging.
    """
    if event.exception:
        logger.error(
            f"Job {event.job_id} failed with exception: {event.exception}",
            exc_info=event.exception,
        )
    else:
        logger.info(f"Job {event.job_id} executed successfully at {utc_now().isoformat()}")


def get_scheduler() -> AsyncIOScheduler | None:
    """Get the global scheduler instance, or None if not started."""
    return _scheduler


def _schedule(scheduler: AsyncIOScheduler, job: RegisteredJob) -> None:
    scheduler.add_job(
        job.func,
        trigger=job.trigger,
        id=job.job_id,
        replace_existing=True,
    )
    logger.info(f"Scheduled job: {job.job_id}")


async def start_scheduler() -> AsyncIOScheduler:
    """
    Initialize and start the background scheduler.

    Every job already in the registry is scheduled before the scheduler
    starts running.

    Returns:
        The started scheduler instance
    """
    global _scheduler

    if _scheduler is not None and _scheduler.running:
        logger.warning("Scheduler already running, returning existing instance")
        return _scheduler

    logger.info("Initializing background job scheduler...")

    _scheduler = AsyncIOScheduler(
        timezone=settings.scheduler_timezone,
        # APScheduler pops "type" out of executor configs, so hand it copies
        executors=copy.deepcopy(SchedulerConfig.EXECUTORS),
        job_defaults=dict(SchedulerConfig.JOB_DEFAULTS),
    )

    _scheduler.add_listener(_job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

    logger.info(f"Scheduling {len(_job_registry)} jobs from registry...")
    for job in _job_registry.values():
        _schedule(_scheduler, job)

    _scheduler.start()

    logger.info("Background job scheduler started successfully")
    return _scheduler


async def stop_scheduler() -> None:
    """
    Stop the background scheduler gracefully.

    Waits for currently running jobs to complete before shutting down.
    """
    global _scheduler

    if _scheduler is None:
        logger.debug("Scheduler not initialized, nothing to stop")
        return

    if not _scheduler.running:
        logger.debug("Scheduler not running, nothing to stop")
        _scheduler = None
        return

    logger.info("Stopping background job scheduler...")
    _scheduler.shutdown(wait=True)

    logger.info("Background job scheduler stopped")
    _scheduler = None


def register_job(job_id: str, func: JobFunc, trigger: BaseTrigger) -> None:
    """
    Register a job.

    If the scheduler is already running the job is scheduled immediately,
    otherwise it is scheduled when ``start_scheduler`` runs. Registering the
    same ID again replaces the previous job.

    Args:
        job_id: Unique identifier for the job
        func: Async function to execute
        trigger: APScheduler trigger (IntervalTrigger, CronTrigger, etc.)

    Example:
        register_job(
            job_id="careers_reconcile_statuses",
            func=reconcile_career_statuses_job,
            trigger=IntervalTrigger(hours=1),
        )
    """
    job = RegisteredJob(job_id=job_id, func=func, trigger=trigger)
    _job_registry[job_id] = job

    if _scheduler is None:
        logger.debug(f"Scheduler not initialized, job {job_id} will be scheduled on start")
        return

    _schedule(_scheduler, job)


def clear_registry() -> None:
    """Forget all registered jobs. Does not touch a running scheduler."""
    _job_registry.clear()


async def trigger_job_manually(job_id: str) -> dict[str, Any]:
    """
    Run a registered job now, bypassing the scheduler.

    Args:
        job_id: The ID of the job to trigger

    Returns:
        Dict with execution result including:
        - job_id: The job ID
        - status: "success" or "error"
        - executed_at: Execution timestamp
        - result: Whatever the job returned (on success)
        - error: Error message (on failure)

    Raises:
        ValueError: If job_id is not found in the registry
    """
    if job_id not in _job_registry:
        raise ValueError(
            f"Job {job_id} not found in registry. Available jobs: {list(_job_registry.keys())}"
        )

    job = _job_registry[job_id]
    executed_at = utc_now()

    logger.info(f"Manually triggering job: {job_id}")

    try:
        result = await job.func()
    except Exception as e:
        logger.error(f"Manual execution of job {job_id} failed: {e}", exc_info=True)
        return {
            "job_id": job_id,
            "status": "error",
            "executed_at": executed_at.isoformat(),
            "error": str(e),
        }

    logger.info(f"Manual execution of job {job_id} completed successfully")
    return {
        "job_id": job_id,
        "status": "success",
        "executed_at": executed_at.isoformat(),
        "result": result,
    }


def list_registered_jobs() -> list[dict[str, Any]]:
    """
    List all registered jobs and their status.

    Returns:
        List of job information dicts containing:
        - job_id: The job ID
        - trigger: Human-readable trigger description
        - next_run_time: When the job will run next (if scheduled)
        - is_paused: Whether the job is currently paused
    """
    jobs = []

    for job_id, registered in _job_registry.items():
        job_info: dict[str, Any] = {
            "job_id": job_id,
            "registered": True,
            "trigger": str(registered.trigger),
        }

        if _scheduler is not None:
            scheduled_job = _scheduler.get_job(job_id)
            if scheduled_job:
                job_info["next_run_time"] = (
                    scheduled_job.next_run_time.isoformat() if scheduled_job.next_run_time else None
                )
                job_info["is_paused"] = scheduled_job.next_run_time is None
            else:
                job_info["next_run_time"] = None
                job_info["is_paused"] = True

        jobs.append(job_info)

    return jobs


def pause_job(job_id: str) -> bool:
    """
    Pause a scheduled job.

    Returns:
        True if job was paused, False if job not found
    """
    if _scheduler is None:
        logger.warning("Cannot pause job: scheduler not initialized")
        return False

    if _scheduler.get_job(job_id):
        _scheduler.pause_job(job_id)
        logger.info(f"Paused job: {job_id}")
        return True

    logger.warning(f"Job not found for pausing: {job_id}")
    return False


def resume_job(job_id: str) -> bool:
    """
    Resume a paused job.

    Returns:
        True if job was resumed, False if job not found
    """
    if _scheduler is None:
        logger.warning("Cannot resume job: scheduler not initialized")
        return False

    if _scheduler.get_job(job_id):
        _scheduler.resume_job(job_id)
        logger.info(f"Resumed job: {job_id}")
        return True

    logger.warning(f"Job not found for resuming: {job_id}")
    return False
