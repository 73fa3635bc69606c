"""
Job runners.

Each runner builds its clients once, wires the adapters, runs one job and
closes the clients. Tests pass their own clients (e.g. an httpx client on a
MockTransport) which are left open for the caller to close.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional, Tuple

import httpx

from ..adapters.factory import SyncAdapters, create_adapters
from ..core.config import Settings
from .icon_sync_service import IconSyncService, RunSummary, SleepFunc, SyncPacing
from .schema_reader import SchemaSourceReader
from .schema_refresh_service import SchemaRefreshService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def open_adapters(
    settings: Settings,
    http_client: Optional[httpx.AsyncClient] = None,
    s3_client: Optional[Any] = None,
) -> AsyncIterator[SyncAdapters]:
    """Build the adapters for one run, owning the HTTP client unless one is given."""
    if http_client is not None:
        yield create_adapters(settings, http_client, s3_client)
        return

    async with httpx.AsyncClient(
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        follow_redirects=True,
        headers={"User-Agent": f"{settings.APP_NAME}/{settings.APP_VERSION}"},
    ) as client:
        yield create_adapters(settings, client, s3_client)


async def run_icon_sync(
    settings: Settings,
    http_client: Optional[httpx.AsyncClient] = None,
    s3_client: Optional[Any] = None,
    sleep: Optional[SleepFunc] = None,
) -> RunSummary:
    """
    Run one icon sync: load the schema, then sync every item.

    Raises:
        SchemaUnavailableError: If the schema document cannot be retrieved
        SchemaParseError: If the schema document cannot be parsed
    """
    logger.info("Starting icon sync", extra={"event_type": "icon_sync.job_started"})

    async with open_adapters(settings, http_client, s3_client) as adapters:
        reader = SchemaSourceReader(
            adapters.schema_store, adapters.parser, settings.SCHEMA_FILE_NAME
        )
        items = await reader.load()

        service = IconSyncService(
            icon_store=adapters.icon_store,
            fetcher=adapters.fetcher,
            transcoder=adapters.transcoder,
            pacing=SyncPacing(
                existing_item_delay=settings.EXISTING_ITEM_DELAY_SECONDS,
                new_item_delay=settings.NEW_ITEM_DELAY_SECONDS,
            ),
            sleep=sleep,
        )
        summary = await service.run(items)

    logger.info("Done.", extra={"event_type": "icon_sync.job_completed"})
    return summary


async def run_schema_refresh(
    settings: Settings,
    http_client: Optional[httpx.AsyncClient] = None,
    s3_client: Optional[Any] = None,
) -> int:
    """Run one schema refresh; returns the stored byte count."""
    logger.info("Starting schema refresh", extra={"event_type": "schema_refresh.job_started"})

    async with open_adapters(settings, http_client, s3_client) as adapters:
        service = SchemaRefreshService(
            adapters.steam_api,
            adapters.http_client,
            adapters.schema_store,
            settings.SCHEMA_FILE_NAME,
        )
        return await service.refresh()


async def run_health_check(
    settings: Settings,
    s3_client: Optional[Any] = None,
) -> Tuple[bool, Dict[str, Dict[str, Any]]]:
    """
    Check health of the stores and the transcoder.

    Returns:
        Tuple of (all_healthy, status_dict)
    """
    async with open_adapters(settings, s3_client=s3_client) as adapters:
        schema_ok, schema_msg = await adapters.schema_store.health_check()
        icon_ok, icon_msg = await adapters.icon_store.health_check()
        transcoder_ok, transcoder_msg = await adapters.transcoder.health_check()

    return schema_ok and icon_ok and transcoder_ok, {
        "schema_store": {"healthy": schema_ok, "message": schema_msg},
        "icon_store": {"healthy": icon_ok, "message": icon_msg},
        "transcoder": {"healthy": transcoder_ok, "message": transcoder_msg},
    }
