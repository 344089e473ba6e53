"""
Careers Background Jobs

Scheduled reconciliation of career statuses against their date windows:
- PENDING careers whose start date has passed become ACTIVE
- ACTIVE careers whose end date has passed become INACTIVE

Design Principles:
- The job is idempotent (safe to run multiple times)
- The job opens its own database session
- The clock is sampled once per run
- Failures are logged and reported, never raised to the scheduler;
  the next scheduled run retries

Schedule:
- Interval run every CAREER_STATUS_INTERVAL_MINUTES (default: 5 minutes in
  development, hourly otherwise)
- In production, an extra daily run at midnight as a backup
- Both can be triggered manually via the debug jobs endpoint
"""

import logging
from typing import Any

from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from schoolcms.core.clock import Clock, utc_now
from schoolcms.core.config import settings
from schoolcms.core.database import async_session_maker
from schoolcms.core.scheduler import register_job
from schoolcms.modules.careers import service

logger = logging.getLogger(__name__)

# Job IDs for registration and manual triggering
JOB_ID_RECONCILE_STATUSES = "careers_reconcile_statuses"
JOB_ID_RECONCILE_STATUSES_DAILY = "careers_reconcile_statuses_daily"


async def reconcile_career_statuses_job(clock: Clock = utc_now) -> dict[str, Any]:
    """
    Bring every career's status in line with the current time.

    Returns:
        Dict with job execution summary including:
        - executed_at: The instant the statuses were reconciled against
        - status: "success" or "error"
        - activated_count / deactivated_count on success
        - error: Error message on failure
    """
    executed_at = clock()

    logger.info(f"Starting career status reconciliation at {executed_at.isoformat()}")

    try:
        async with async_session_maker() as db:
            result = await service.reconcile_career_statuses(db, clock=lambda: executed_at)
    except Exception as e:
        logger.error(f"Career status reconciliation failed: {e}", exc_info=True)
        return {
            "executed_at": executed_at.isoformat(),
            "status": "error",
            "error": str(e),
        }

    logger.info(
        f"Career status reconciliation completed. "
        f"Activated: {result.activated_count}, Deactivated: {result.deactivated_count}"
    )

    return {
        "executed_at": executed_at.isoformat(),
        "status": "success",
        "activated_count": result.activated_count,
        "deactivated_count": result.deactivated_count,
    }


def register_career_jobs() -> None:
    """
    Register career background jobs with the scheduler.

    Call during application startup, before the scheduler is started.
    """
    logger.info("Registering career background jobs...")

    interval = settings.career_status_interval
    register_job(
        job_id=JOB_ID_RECONCILE_STATUSES,
        func=reconcile_career_statuses_job,
        trigger=IntervalTrigger(seconds=int(interval.total_seconds())),
    )
    logger.info(f"Registered job: {JOB_ID_RECONCILE_STATUSES} (interval: {interval})")

    if settings.is_production:
        register_job(
            job_id=JOB_ID_RECONCILE_STATUSES_DAILY,
            func=reconcile_career_statuses_job,
            trigger=CronTrigger(hour=0, minute=0, timezone=settings.scheduler_timezone),
        )
        logger.info(f"Registered job: {JOB_ID_RECONCILE_STATUSES_DAILY} (daily at 00:00)")
