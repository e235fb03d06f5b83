"""Cart lines and the per-restaurant order requests built from them.

Both are transient: a cart is split into OrderRequests at checkout and
only the resulting Orders are ever persisted.
"""

from __future__ import annotations

from dataclasses import dataclass

from fds.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class CartLine:
    """One row of a shopping cart, priced when it was added to the cart."""

    restaurant_id: str
    menu_item_id: str
    quantity: Quantity
    unit_price: Money
    name: str = ""
    image: str = ""

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class OrderRequest:
    """The partition of a cart belonging to one restaurant."""

    restaurant_id: str
    lines: tuple[CartLine, ...]
    total: Money
