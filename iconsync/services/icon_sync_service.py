"""
Icon sync service that orchestrates the store, fetcher and transcoder.

Walks the schema items in order and makes sure every item with an inventory
image has a "{id}.jpg" icon in the icon store. Each item's outcome is returned
as an ItemResult; one item failing never stops the run.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from ..adapters.interfaces import (
    AdapterError,
    AssetStore,
    ICON_CONTENT_TYPE,
    IconFetcher,
    ImageTranscoder,
    ItemRecord,
)

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class ItemOutcome(str, Enum):
    """What happened to one item during a run."""
    SKIPPED_EMPTY_PATH = "skipped_empty_path"
    SKIPPED_EXISTS = "skipped_exists"
    STORED = "stored"
    FAILED = "failed"


@dataclass
class ItemResult:
    """Result of processing one item."""
    item_id: int
    name: str
    key: str
    outcome: ItemOutcome
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome != ItemOutcome.FAILED


@dataclass
class SyncPacing:
    """
    Delays inserted after each item to respect upstream rate limits.

    Attributes:
        existing_item_delay: Seconds to wait after an item whose icon exists
        new_item_delay: Seconds to wait after storing (or failing) an item
    """
    existing_item_delay: float = 0.5
    new_item_delay: float = 5.0

    def delay_for(self, outcome: ItemOutcome) -> float:
        if outcome == ItemOutcome.SKIPPED_EMPTY_PATH:
            return 0.0
        if outcome == ItemOutcome.SKIPPED_EXISTS:
            return self.existing_item_delay
        return self.new_item_delay


@dataclass
class RunSummary:
    """Aggregated results of one sync run, in schema order."""
    started_at: datetime
    finished_at: Optional[datetime] = None
    results: List[ItemResult] = field(default_factory=list)

    def count(self, outcome: ItemOutcome) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)

    @property
    def counts(self) -> Dict[str, int]:
        return {outcome.value: self.count(outcome) for outcome in ItemOutcome}

    @property
    def failures(self) -> List[ItemResult]:
        return [r for r in self.results if r.outcome == ItemOutcome.FAILED]

    def to_dict(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "total": len(self.results),
            "counts": self.counts,
            "failures": [
                {
                    "item_id": r.item_id,
                    "key": r.key,
                    "error_code": r.error_code,
                    "error_message": r.error_message,
                }
                for r in self.failures
            ],
        }


class IconSyncService:
    """
    Service for bringing the icon store up to date with the schema.

    Processing is strictly sequential: one item is fully fetched, transcoded
    and stored before the next one starts.
    """

    def __init__(
        self,
        icon_store: AssetStore,
        fetcher: IconFetcher,
        transcoder: ImageTranscoder,
        pacing: Optional[SyncPacing] = None,
        sleep: Optional[SleepFunc] = None,
    ):
        """
        Initialize the icon sync service.

        Args:
            icon_store: Store holding "{id}.jpg" icons
            fetcher: Source icon fetcher
            transcoder: Source icon -> JPEG transcoder
            pacing: Inter-item delays (defaults to 0.5s / 5s)
            sleep: Coroutine function used for pacing (defaults to asyncio.sleep)
        """
        self._store = icon_store
        self._fetcher = fetcher
        self._transcoder = transcoder
        self._pacing = pacing or SyncPacing()
        self._sleep = sleep or asyncio.sleep

    async def run(self, items: Iterable[ItemRecord]) -> RunSummary:
        """
        Process every item in order.

        Args:
            items: Item records in schema order

        Returns:
            RunSummary with one ItemResult per item
        """
        items = list(items)
        summary = RunSummary(started_at=datetime.now(timezone.utc))

        logger.info(
            "Starting to process %d items",
            len(items),
            extra={"event_type": "icon_sync.run_started", "item_count": len(items)},
        )

        for item in items:
            result = await self.process_item(item)
            summary.results.append(result)

            delay = self._pacing.delay_for(result.outcome)
            if delay > 0:
                await self._sleep(delay)

        summary.finished_at = datetime.now(timezone.utc)
        logger.info(
            "Icon sync finished: %s",
            summary.counts,
            extra={"event_type": "icon_sync.run_completed", "counts": summary.counts},
        )
        return summary

    async def process_item(self, item: ItemRecord) -> ItemResult:
        """
        Bring one item's icon up to date.

        Never raises for adapter or unexpected errors; they are returned as a
        FAILED result.
        """
        key = item.icon_key

        if not item.has_image:
            logger.debug(
                "Item %s has no inventory image, skipping",
                item.id,
                extra={"event_type": "icon_sync.item_skipped_empty", "item_id": item.id},
            )
            return ItemResult(item.id, item.name, key, ItemOutcome.SKIPPED_EMPTY_PATH)

        context = {"item_id": item.id, "item_name": item.name, "key": key}
        logger.info(
            "Starting to process %s",
            item.name,
            extra={"event_type": "icon_sync.item_started", **context},
        )

        try:
            if await self._store.exists(key):
                logger.info(
                    "%s already exists in the icon store, skipping",
                    key,
                    extra={"event_type": "icon_sync.item_skipped_exists", **context},
                )
                return ItemResult(item.id, item.name, key, ItemOutcome.SKIPPED_EXISTS)

            logger.info(
                "Fetching icon for %s",
                item.image_path,
                extra={"event_type": "icon_sync.item_fetch", **context},
            )
            source = await self._fetcher.fetch(item.image_path)

            logger.info(
                "Transcoding %d bytes to JPEG",
                len(source),
                extra={"event_type": "icon_sync.item_transcode", **context},
            )
            icon = await self._transcoder.transcode(source)

            logger.info(
                "Storing %s (%dx%d, %d bytes)",
                key,
                icon.width,
                icon.height,
                icon.file_size,
                extra={"event_type": "icon_sync.item_store", **context},
            )
            await self._store.put(key, icon.data, ICON_CONTENT_TYPE)

        except AdapterError as e:
            logger.error(
                "Failed to process item %s: %s",
                item.id,
                e.message,
                extra={
                    "event_type": "icon_sync.item_failed",
                    "error_code": e.error_code,
                    **context,
                },
            )
            return ItemResult(
                item.id, item.name, key, ItemOutcome.FAILED,
                error_code=e.error_code,
                error_message=e.message,
            )
        except Exception as e:
            logger.exception(
                "Unexpected error processing item %s",
                item.id,
                extra={
                    "event_type": "icon_sync.item_failed",
                    "error_code": "INTERNAL_ERROR",
                    **context,
                },
            )
            return ItemResult(
                item.id, item.name, key, ItemOutcome.FAILED,
                error_code="INTERNAL_ERROR",
                error_message=str(e),
            )

        return ItemResult(item.id, item.name, key, ItemOutcome.STORED)
