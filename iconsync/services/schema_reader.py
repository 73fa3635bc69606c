"""
Schema source reader.

Loads the stored items_game.vdf and hands it to the schema parser.
"""
import logging
from typing import List

from ..adapters.interfaces import (
    AssetNotFoundError,
    AssetStore,
    ItemRecord,
    SchemaParser,
    SchemaUnavailableError,
    StoreAccessError,
)

logger = logging.getLogger(__name__)


class SchemaSourceReader:
    """Reads the schema document from the schema container."""

    def __init__(self, store: AssetStore, parser: SchemaParser, file_name: str):
        self._store = store
        self._parser = parser
        self._file_name = file_name

    async def load(self) -> List[ItemRecord]:
        """
        Load item records in schema order.

        Raises:
            SchemaUnavailableError: If the document cannot be retrieved
            SchemaParseError: If the parser rejects the document
        """
        logger.info(
            "Downloading schema %s from container %s",
            self._file_name,
            self._store.container,
            extra={"event_type": "schema.load_started", "key": self._file_name},
        )

        try:
            raw = await self._store.get(self._file_name)
        except AssetNotFoundError as e:
            raise SchemaUnavailableError(
                f"Schema {self._file_name} not found in container {self._store.container}", e
            )
        except StoreAccessError as e:
            raise SchemaUnavailableError(f"Schema {self._file_name} could not be read: {e}", e)

        lines = raw.decode("utf-8-sig", errors="replace").splitlines()
        items = self._parser.parse(lines)

        logger.info(
            "Loaded %d items from schema",
            len(items),
            extra={"event_type": "schema.load_completed", "item_count": len(items)},
        )
        return items
