"""Icon sync services."""
from .icon_sync_service import (
    IconSyncService,
    ItemOutcome,
    ItemResult,
    RunSummary,
    SyncPacing,
)
from .jobs import run_health_check, run_icon_sync, run_schema_refresh
from .schema_reader import SchemaSourceReader
from .schema_refresh_service import SchemaRefreshService

__all__ = [
    "IconSyncService",
    "ItemOutcome",
    "ItemResult",
    "RunSummary",
    "SyncPacing",
    "SchemaSourceReader",
    "SchemaRefreshService",
    "run_icon_sync",
    "run_schema_refresh",
    "run_health_check",
]
