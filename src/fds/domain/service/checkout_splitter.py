"""Domain service: Checkout Splitter.

A cart may hold items from several restaurants; each restaurant gets its
own order. Splitting is pure: totals come from the prices the cart lines
carry, and the catalog is re-checked later when each order is created.
"""

from __future__ import annotations

from collections.abc import Iterable

from fds.domain.exceptions import EmptyCartError
from fds.domain.model.cart import CartLine, OrderRequest
from fds.domain.model.value_objects import Money


def split_cart(lines: Iterable[CartLine]) -> list[OrderRequest]:
    """Partition cart lines into one OrderRequest per restaurant.

    Restaurants appear in the order they first occur in the cart, and
    lines keep their relative order within a restaurant.
    """
    grouped: dict[str, list[CartLine]] = {}
    for line in lines:
        grouped.setdefault(line.restaurant_id, []).append(line)

    if not grouped:
        raise EmptyCartError("Cart is empty, nothing to order")

    requests: list[OrderRequest] = []
    for restaurant_id, restaurant_lines in grouped.items():
        total = Money.zero(restaurant_lines[0].unit_price.currency)
        for line in restaurant_lines:
            total = total + line.line_total
        requests.append(
            OrderRequest(
                restaurant_id=restaurant_id,
                lines=tuple(restaurant_lines),
                total=total,
            )
        )
    return requests
