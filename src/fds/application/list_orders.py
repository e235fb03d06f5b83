"""Application services: order list queries.

These are the re-fetch surface for clients; a subscriber that reconnects
to the broadcaster reads current state from here.
"""

from __future__ import annotations

from fds.application.dto import OrderDTO, to_order_dto
from fds.domain.repository.order_repository import OrderRepository


class ListClaimableHandler:
    """The delivery pool: ready, unassigned orders, oldest first."""

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self) -> list[OrderDTO]:
        return [to_order_dto(o) for o in self._order_repo.list_claimable()]


class ListByAgentHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, agent_id: str) -> list[OrderDTO]:
        return [to_order_dto(o) for o in self._order_repo.list_by_agent(agent_id)]


class ListByCustomerHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, customer_id: str) -> list[OrderDTO]:
        return [to_order_dto(o) for o in self._order_repo.list_by_customer(customer_id)]


class ListByRestaurantHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, restaurant_id: str) -> list[OrderDTO]:
        return [
            to_order_dto(o) for o in self._order_repo.list_by_restaurant(restaurant_id)
        ]
