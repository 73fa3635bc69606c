"""
items_game.vdf schema parser.

The document is Valve KeyValues text; parsing is delegated to the ``vdf``
library and this module only maps the ``items_game.items`` section to
ItemRecords.
"""
import logging
from typing import Any, List, Mapping, Optional, Sequence

import vdf

from .interfaces import ItemRecord, SchemaParseError, SchemaParser

logger = logging.getLogger(__name__)


class VdfSchemaParser(SchemaParser):
    """
    Parser for the Dota 2 items_game.vdf document.

    Document shape (abridged):
        "items_game"
        {
            "items"
            {
                "default" { ... }
                "4000"
                {
                    "name"              "Axe's Helm"
                    "image_inventory"   "econ/items/axe/axe_helm"
                }
            }
        }
    """

    def parse(self, lines: Sequence[str]) -> List[ItemRecord]:
        try:
            document = vdf.loads("\n".join(lines))
        except (SyntaxError, ValueError, TypeError) as e:
            raise SchemaParseError(f"Malformed schema document: {e}", e)

        items_game = _find_section(document, "items_game")
        if items_game is None:
            raise SchemaParseError("Schema document has no items_game section")

        items = _find_section(items_game, "items")
        if items is None:
            raise SchemaParseError("Schema document has no items section")

        records = []
        for key, value in items.items():
            record = self._parse_item(key, value)
            if record is not None:
                records.append(record)

        logger.debug("Parsed %d items from schema", len(records))
        return records

    def _parse_item(self, key: str, value: Any) -> Optional[ItemRecord]:
        """Parse one item entry; non-item entries such as "default" are skipped."""
        if not isinstance(value, Mapping) or not str(key).isdigit():
            return None

        return ItemRecord(
            id=int(key),
            name=str(value.get("name", "")),
            image_path=str(value.get("image_inventory", "")),
        )


def _find_section(parent: Mapping, name: str) -> Optional[Mapping]:
    """Case-insensitive section lookup; KeyValues keys are not case sensitive."""
    for key, value in parent.items():
        if str(key).lower() == name and isinstance(value, Mapping):
            return value
    return None
