"""Scheduler module for the sync jobs."""

from iconsync.scheduler.sync_scheduler import (
    build_scheduler,
    create_cron_trigger,
    get_scheduler_status,
    shutdown_scheduler,
    start_scheduler,
)

__all__ = [
    "build_scheduler",
    "create_cron_trigger",
    "start_scheduler",
    "shutdown_scheduler",
    "get_scheduler_status",
]
