"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items.
All business invariants are enforced here; status changes themselves go
through the store's conditional update (see ``OrderRepository``), guarded
by ``transition_policy``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from fds.domain.exceptions import ValidationError
from fds.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


@dataclass(frozen=True)
class OrderItem:
    """Captures the price of a menu item at order-creation time.

    Identified by (order id, ``position``). The ``unit_price`` is a copy,
    never a live reference to the catalog.
    """

    position: int
    menu_item_id: str
    name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINE_ITEMS = 50
DEFAULT_PAYMENT_METHOD = "cash"
DEFAULT_PAYMENT_STATUS = "pending"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order:
    """Aggregate root for food orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    customer_id: str
    restaurant_id: str
    items: list[OrderItem]
    delivery_address: str
    customer_phone: str = ""
    status: OrderStatus = OrderStatus.PENDING
    agent_id: str | None = None
    payment_method: str = DEFAULT_PAYMENT_METHOD
    payment_status: str = DEFAULT_PAYMENT_STATUS
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer_id: str,
        restaurant_id: str,
        items: list[OrderItem],
        delivery_address: str,
        customer_phone: str = "",
        payment_method: str = DEFAULT_PAYMENT_METHOD,
    ) -> Order:
        """Create a new pending order, enforcing all invariants.

        Line positions are renumbered 1..n in the given order.
        """
        if not customer_id or not customer_id.strip():
            raise ValidationError("Customer is required")

        if not restaurant_id or not restaurant_id.strip():
            raise ValidationError("Restaurant is required")

        if not delivery_address or not delivery_address.strip():
            raise ValidationError("Delivery address is required")

        if not items:
            raise ValidationError("Order must contain at least one item")

        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        numbered = [
            OrderItem(
                position=position,
                menu_item_id=item.menu_item_id,
                name=item.name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for position, item in enumerate(items, start=1)
        ]

        now = _utcnow()
        return Order(
            id=None,
            customer_id=customer_id.strip(),
            restaurant_id=restaurant_id.strip(),
            items=numbered,
            delivery_address=delivery_address.strip(),
            customer_phone=(customer_phone or "").strip(),
            payment_method=payment_method or DEFAULT_PAYMENT_METHOD,
            created_at=now,
            updated_at=now,
        )

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        if not self.items:
            return Money.zero()
        result = Money.zero(self.items[0].unit_price.currency)
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def is_claimable(self) -> bool:
        return self.status == OrderStatus.READY and self.agent_id is None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal
