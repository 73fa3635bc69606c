"""
Icon sync command line entry point.

Commands:
- sync-icons: run one icon sync and print the run summary as JSON
- refresh-schema: download the latest schema into the schema container
- schedule: run both jobs on their cron schedules until interrupted
- health: check the stores and the transcoder
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from iconsync.adapters.interfaces import AdapterError
from iconsync.core.config import Settings, get_settings
from iconsync.core.logging_config import configure_logging
from iconsync.scheduler import get_scheduler_status, shutdown_scheduler, start_scheduler
from iconsync.services.jobs import run_health_check, run_icon_sync, run_schema_refresh

logger = logging.getLogger("iconsync")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iconsync",
        description="Keep Dota 2 cosmetic item icons in sync with the game schema",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override ICONSYNC_LOG_LEVEL (DEBUG, INFO, WARNING, ...)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("sync-icons", help="Run one icon sync")
    subparsers.add_parser("refresh-schema", help="Download the latest schema")
    subparsers.add_parser("schedule", help="Run both jobs on their schedules")
    subparsers.add_parser("health", help="Check store and transcoder health")
    return parser


async def _sync_icons(settings: Settings) -> int:
    summary = await run_icon_sync(settings)
    print(json.dumps(summary.to_dict(), indent=2))
    return 0


async def _refresh_schema(settings: Settings) -> int:
    size = await run_schema_refresh(settings)
    print(json.dumps({"schema": settings.SCHEMA_FILE_NAME, "bytes": size}))
    return 0


async def _health(settings: Settings) -> int:
    healthy, components = await run_health_check(settings)
    print(json.dumps({"status": "healthy" if healthy else "degraded", "components": components}, indent=2))
    return 0 if healthy else 1


async def _schedule(settings: Settings) -> int:
    await start_scheduler(settings)
    for job in get_scheduler_status()["jobs"]:
        logger.info(f"Scheduled {job['name']}: next run at {job['next_run']}")

    try:
        await asyncio.Event().wait()
    finally:
        await shutdown_scheduler()
    return 0


COMMANDS = {
    "sync-icons": _sync_icons,
    "refresh-schema": _refresh_schema,
    "health": _health,
    "schedule": _schedule,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings, level=args.log_level.upper() if args.log_level else None)

    try:
        return asyncio.run(COMMANDS[args.command](settings))
    except AdapterError as e:
        logger.error(
            f"{args.command} failed: {e.message}",
            extra={"event_type": "system.job_failed", "error_code": e.error_code},
        )
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
