"""Scheduled execution of the sync jobs.

Runs the icon sync and the schema refresh on their configured cron schedules.
Each job allows at most one running instance; a run that is still going when
its next trigger fires causes that trigger to be skipped.

Usage:
    await start_scheduler(settings)
    ...
    await shutdown_scheduler()

Or run standalone:
    iconsync schedule
"""

import logging
from datetime import datetime, timezone
from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from iconsync.core.config import Settings
from iconsync.services.jobs import run_icon_sync, run_schema_refresh

logger = logging.getLogger(__name__)

ICON_SYNC_JOB_ID = "icon_sync"
SCHEMA_REFRESH_JOB_ID = "schema_refresh"

# Global scheduler instance
_scheduler: AsyncIOScheduler | None = None


async def scheduled_icon_sync(settings: Settings) -> None:
    """Icon sync entry point called by APScheduler."""
    try:
        summary = await run_icon_sync(settings)
        logger.info(
            f"Scheduled icon sync completed: {summary.counts}",
            extra={"event_type": "scheduler.icon_sync_completed"},
        )
    except Exception as e:
        logger.exception(
            f"Scheduled icon sync failed: {e}",
            extra={"event_type": "scheduler.icon_sync_failed"},
        )


async def scheduled_schema_refresh(settings: Settings) -> None:
    """Schema refresh entry point called by APScheduler."""
    try:
        size = await run_schema_refresh(settings)
        logger.info(
            f"Scheduled schema refresh stored {size} bytes",
            extra={"event_type": "scheduler.schema_refresh_completed"},
        )
    except Exception as e:
        logger.exception(
            f"Scheduled schema refresh failed: {e}",
            extra={"event_type": "scheduler.schema_refresh_failed"},
        )


def create_cron_trigger(cron_expression: str, timezone_str: str) -> CronTrigger:
    """
    Create an APScheduler CronTrigger from a cron expression.

    Supports standard 5-field cron: minute hour day month weekday
    Example: "0 0 * * sun" = midnight every Sunday
    """
    parts = cron_expression.split()

    if len(parts) != 5:
        raise ValueError(
            f"Invalid cron expression: {cron_expression}. "
            "Expected 5 fields: minute hour day month weekday"
        )

    return CronTrigger(
        minute=parts[0],
        hour=parts[1],
        day=parts[2],
        month=parts[3],
        day_of_week=parts[4],
        timezone=timezone_str,
    )


def build_scheduler(settings: Settings) -> AsyncIOScheduler:
    """Create a scheduler with both sync jobs registered (not started)."""
    scheduler = AsyncIOScheduler(timezone=settings.SCHEDULE_TIMEZONE)

    icon_sync_job_kwargs: dict[str, Any] = {}
    if settings.RUN_ON_STARTUP:
        icon_sync_job_kwargs["next_run_time"] = datetime.now(timezone.utc)

    scheduler.add_job(
        scheduled_icon_sync,
        trigger=create_cron_trigger(settings.ICON_SYNC_CRON, settings.SCHEDULE_TIMEZONE),
        args=[settings],
        id=ICON_SYNC_JOB_ID,
        name="Icon Sync",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
        **icon_sync_job_kwargs,
    )
    scheduler.add_job(
        scheduled_schema_refresh,
        trigger=create_cron_trigger(settings.SCHEMA_REFRESH_CRON, settings.SCHEDULE_TIMEZONE),
        args=[settings],
        id=SCHEMA_REFRESH_JOB_ID,
        name="Schema Refresh",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler


async def start_scheduler(settings: Settings) -> None:
    """
    Start the sync scheduler.

    Must be called from within a running event loop.
    """
    global _scheduler

    if _scheduler is not None:
        logger.warning("Scheduler already running")
        return

    _scheduler = build_scheduler(settings)
    _scheduler.start()
    logger.info(
        "Sync scheduler started",
        extra={"event_type": "scheduler.started", "run_on_startup": settings.RUN_ON_STARTUP},
    )


async def shutdown_scheduler() -> None:
    """Shutdown the scheduler gracefully."""
    global _scheduler

    if _scheduler:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        logger.info("Sync scheduler stopped", extra={"event_type": "scheduler.stopped"})


def get_scheduler_status() -> dict[str, Any]:
    """
    Get current scheduler status for monitoring.

    Returns:
        Dictionary with scheduler state and job information
    """
    if not _scheduler:
        return {
            "running": False,
            "jobs": [],
        }

    jobs = []
    for job in _scheduler.get_jobs():
        next_run = job.next_run_time
        jobs.append(
            {
                "id": job.id,
                "name": job.name,
                "next_run": next_run.isoformat() if next_run else None,
                "trigger": str(job.trigger),
            }
        )

    return {
        "running": _scheduler.running,
        "jobs": jobs,
    }
