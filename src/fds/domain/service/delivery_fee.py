"""Domain service: what an agent earns for delivering an order."""

from __future__ import annotations

from fds.domain.model.value_objects import Money

DELIVERY_FEE_PERCENT = 10


def delivery_fee_for(total: Money) -> Money:
    """10% of the order total, rounded down to a whole minor unit."""
    return Money(total.amount * DELIVERY_FEE_PERCENT // 100, total.currency)
