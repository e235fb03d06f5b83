"""JSON-file-backed implementation of RestaurantDirectory."""

from __future__ import annotations

import json
from pathlib import Path

from fds.domain.repository.restaurant_directory import RestaurantDirectory


class JsonRestaurantDirectory(RestaurantDirectory):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    def get_owner_id(self, restaurant_id: str) -> str | None:
        for raw in self._load_raw():
            if str(raw["id"]) == restaurant_id:
                owner = raw.get("owner_id")
                return str(owner) if owner is not None else None
        return None

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
