"""Abstract read-only access to the menu catalog.

The catalog is owned by restaurant management, outside this core.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from fds.domain.model.catalog import CatalogEntry


class CatalogReader(ABC):

    @abstractmethod
    def lookup(self, menu_item_id: str) -> CatalogEntry:
        """Return current price and availability for a menu item.

        Raises EntityNotFoundError if the item no longer exists.
        """
