"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from fds.domain.model.order import Order

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class CartLineSpec:
    """Input: one cart row as submitted by the customer's client."""

    restaurant_id: str
    menu_item_id: str
    quantity: int
    price: int  # minor units, as shown when added to the cart
    name: str = ""
    image: str = ""


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: a single line item as displayed to the user."""

    position: int
    menu_item_id: str
    name: str
    quantity: int
    unit_price: str  # formatted, e.g. "1,500 XAF"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    customer_id: str
    restaurant_id: str
    status: str
    items: list[OrderItemDTO]
    total: str
    total_amount: int
    delivery_address: str
    customer_phone: str
    agent_id: str | None
    payment_method: str
    payment_status: str
    created_at: str
    updated_at: str


def to_order_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        customer_id=order.customer_id,
        restaurant_id=order.restaurant_id,
        status=order.status.value,
        items=[
            OrderItemDTO(
                position=item.position,
                menu_item_id=item.menu_item_id,
                name=item.name,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        total=str(order.total),
        total_amount=order.total.amount,
        delivery_address=order.delivery_address,
        customer_phone=order.customer_phone,
        agent_id=order.agent_id,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        created_at=order.created_at.strftime(TIMESTAMP_FORMAT),
        updated_at=order.updated_at.strftime(TIMESTAMP_FORMAT),
    )
