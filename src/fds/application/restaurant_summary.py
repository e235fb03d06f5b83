"""Application service: Restaurant Summary use case (query)."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timezone

from fds.domain.model.order import Order, OrderStatus
from fds.domain.model.value_objects import Money
from fds.domain.repository.order_repository import OrderRepository

OPEN_STATUSES = (OrderStatus.PENDING, OrderStatus.PREPARING)


@dataclass(frozen=True)
class RestaurantSummaryDTO:
    restaurant_id: str
    orders_today: int
    open_orders: int
    total_revenue: str
    today_revenue: str


class RestaurantSummaryHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, restaurant_id: str, today: date | None = None) -> RestaurantSummaryDTO:
        """Revenue only counts delivered orders."""
        today = today or datetime.now(timezone.utc).date()
        orders = self._order_repo.list_by_restaurant(restaurant_id)

        todays = [o for o in orders if o.created_at.date() == today]
        delivered = [o for o in orders if o.status == OrderStatus.DELIVERED]

        return RestaurantSummaryDTO(
            restaurant_id=restaurant_id,
            orders_today=len(todays),
            open_orders=sum(1 for o in orders if o.status in OPEN_STATUSES),
            total_revenue=str(_sum_totals(delivered)),
            today_revenue=str(
                _sum_totals(o for o in delivered if o.created_at.date() == today)
            ),
        )


def _sum_totals(orders: Iterable[Order]) -> Money:
    result = Money.zero()
    for order in orders:
        result = result + order.total
    return result
