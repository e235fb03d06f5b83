"""JSON-file-backed implementation of CatalogReader.

Stands in for the restaurant-management service that owns menus. The
file is re-read on every lookup so price and availability edits show up
immediately.
"""

from __future__ import annotations

import json
from pathlib import Path

from fds.domain.exceptions import EntityNotFoundError
from fds.domain.model.catalog import CatalogEntry
from fds.domain.model.value_objects import DEFAULT_CURRENCY, Money
from fds.domain.repository.catalog_reader import CatalogReader


class JsonCatalogReader(CatalogReader):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- CatalogReader interface ----------------------------------------------

    def lookup(self, menu_item_id: str) -> CatalogEntry:
        entry = self._load().get(menu_item_id)
        if entry is None:
            raise EntityNotFoundError(f"Menu item not found: '{menu_item_id}'")
        return entry

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, CatalogEntry]:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        return {
            str(item["id"]): CatalogEntry(
                menu_item_id=str(item["id"]),
                restaurant_id=str(item["restaurant_id"]),
                name=item.get("name", ""),
                price=Money(int(item["price"]), item.get("currency", DEFAULT_CURRENCY)),
                available=bool(item.get("is_available", True)),
            )
            for item in raw
        }

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
