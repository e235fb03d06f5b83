"""Events announced after an order is created or changes status.

Events are notifications, never the source of truth: a subscriber that
missed some must re-read orders through the query handlers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Union

from fds.domain.model.order import OrderStatus
from fds.domain.model.value_objects import Money


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderCreated:
    order_id: int
    restaurant_id: str
    customer_id: str
    total: Money
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class StatusChanged:
    order_id: int
    new_status: OrderStatus
    previous_status: OrderStatus
    restaurant_id: str
    customer_id: str
    agent_id: str | None = None
    timestamp: datetime = field(default_factory=_utcnow)


OrderEvent = Union[OrderCreated, StatusChanged]
