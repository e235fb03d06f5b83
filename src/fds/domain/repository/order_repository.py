"""Abstract repository for Order aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Every write is atomic: an order is inserted together with
all of its items or not at all, and a status change is a single
compare-and-set against the expected prior state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from fds.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def add(self, order: Order) -> int:
        """Insert a new order and its items in one transaction.

        Assigns and returns ``order.id``. Raises StoreUnavailableError
        (after rolling back) if any insert fails.
        """

    @abstractmethod
    def update_status(
        self,
        order_id: int,
        expected_status: OrderStatus,
        expected_agent_null: bool,
        new_status: OrderStatus,
        new_agent_id: str | None,
        updated_at: datetime,
    ) -> bool:
        """Conditionally move an order to ``new_status``.

        Applies only if the order is currently in ``expected_status`` and
        its agent reference is null iff ``expected_agent_null``. When
        ``new_agent_id`` is None the agent reference is left unchanged.
        Returns False when no row matched.
        """

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_by_customer(self, customer_id: str) -> list[Order]:
        """Orders placed by a customer, newest first."""

    @abstractmethod
    def list_by_restaurant(self, restaurant_id: str) -> list[Order]:
        """Orders placed with a restaurant, newest first."""

    @abstractmethod
    def list_claimable(self) -> list[Order]:
        """Ready orders without an agent, oldest first."""

    @abstractmethod
    def list_by_agent(self, agent_id: str) -> list[Order]:
        """Every order ever assigned to an agent, newest first."""
