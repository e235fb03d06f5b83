"""Application service: Agent Summary use case (query).

Dashboard figures for one delivery agent. Earnings are estimates from
the delivery fee rule; settlement happens elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone

from fds.domain.model.order import OrderStatus
from fds.domain.model.value_objects import Money
from fds.domain.repository.order_repository import OrderRepository
from fds.domain.service.delivery_fee import delivery_fee_for


@dataclass(frozen=True)
class AgentSummaryDTO:
    agent_id: str
    active_deliveries: int
    completed_deliveries: int
    completed_today: int
    total_earnings: str
    total_earnings_amount: int


class AgentSummaryHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, agent_id: str, today: date | None = None) -> AgentSummaryDTO:
        today = today or datetime.now(timezone.utc).date()
        orders = self._order_repo.list_by_agent(agent_id)

        active = [o for o in orders if o.status == OrderStatus.IN_TRANSIT]
        completed = [o for o in orders if o.status == OrderStatus.DELIVERED]

        earnings = Money.zero()
        for order in completed:
            earnings = earnings + delivery_fee_for(order.total)

        return AgentSummaryDTO(
            agent_id=agent_id,
            active_deliveries=len(active),
            completed_deliveries=len(completed),
            completed_today=sum(1 for o in completed if o.created_at.date() == today),
            total_earnings=str(earnings),
            total_earnings_amount=earnings.amount,
        )
