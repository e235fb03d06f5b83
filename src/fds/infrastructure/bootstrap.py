"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from fds.infrastructure.config import Settings, load_settings
from fds.infrastructure.events.broadcaster import DispatchBroadcaster
from fds.infrastructure.persistence.json_catalog_reader import JsonCatalogReader
from fds.infrastructure.persistence.json_restaurant_directory import (
    JsonRestaurantDirectory,
)
from fds.infrastructure.persistence.sqlite_order_repository import (
    SqliteOrderRepository,
)


def settings() -> Settings:
    return load_settings()


def order_repository() -> SqliteOrderRepository:
    cfg = settings()
    return SqliteOrderRepository(cfg.database_path, timeout=cfg.store_timeout)


def catalog_reader() -> JsonCatalogReader:
    return JsonCatalogReader(settings().catalog_file)


def restaurant_directory() -> JsonRestaurantDirectory:
    return JsonRestaurantDirectory(settings().restaurants_file)


@lru_cache(maxsize=1)
def broadcaster() -> DispatchBroadcaster:
    """The process-wide broadcaster; subscribers live as long as the process."""
    return DispatchBroadcaster()
