"""
Schema refresh service.

Downloads the current items_game.vdf from Steam and stores it in the schema
container, where the icon sync job reads it.
"""
import logging

import httpx

from ..adapters.interfaces import AssetStore, SCHEMA_CONTENT_TYPE
from ..adapters.steam import SteamWebApi, download_bytes

logger = logging.getLogger(__name__)


class SchemaRefreshService:
    """Fetch-and-store of the upstream schema document."""

    def __init__(
        self,
        steam_api: SteamWebApi,
        http_client: httpx.AsyncClient,
        schema_store: AssetStore,
        file_name: str,
    ):
        self._api = steam_api
        self._http = http_client
        self._store = schema_store
        self._file_name = file_name

    async def refresh(self) -> int:
        """
        Replace the stored schema with the latest upstream version.

        Returns:
            Number of bytes stored

        Raises:
            UpstreamLookupError: If the schema URL cannot be resolved
            UpstreamDownloadError: If the schema cannot be downloaded
            StoreAccessError: If the schema cannot be written
        """
        logger.info(
            "Downloading latest schema file from Steam Web API",
            extra={"event_type": "schema_refresh.download_started"},
        )
        url = await self._api.get_schema_url()
        data = await download_bytes(self._http, url)

        logger.info(
            "Uploading %d byte schema to container %s",
            len(data),
            self._store.container,
            extra={"event_type": "schema_refresh.upload_started", "key": self._file_name},
        )
        await self._store.put(self._file_name, data, SCHEMA_CONTENT_TYPE)

        logger.info(
            "Schema refresh completed",
            extra={"event_type": "schema_refresh.completed", "bytes": len(data)},
        )
        return len(data)
