"""Catalog entries as seen by the ordering core.

Menus live independently of orders and have their own lifecycle: prices
change and items go in and out of stock. The core only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass

from fds.domain.model.value_objects import Money


@dataclass(frozen=True)
class CatalogEntry:
    menu_item_id: str
    restaurant_id: str
    name: str
    price: Money
    available: bool = True
