"""Application service: Claim Delivery use case.

An agent becomes the deliverer of a ready order through a single
conditional update (status ``ready`` and no agent, checked atomically
with the write). Whoever's update matches first wins; everyone else gets
ClaimConflictError and should pick another order from the pool.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fds.application.dto import OrderDTO, to_order_dto
from fds.application.publishing import publish_after_commit
from fds.domain.exceptions import (
    ClaimConflictError,
    EntityNotFoundError,
    ValidationError,
)
from fds.domain.model.events import StatusChanged
from fds.domain.model.order import OrderStatus
from fds.domain.repository.event_publisher import EventPublisher
from fds.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


def claim_order(
    order_repo: OrderRepository,
    order_id: int,
    agent_id: str,
    at: datetime,
) -> None:
    """Assign ``agent_id`` to a claimable order or raise ClaimConflictError."""
    claimed = order_repo.update_status(
        order_id,
        expected_status=OrderStatus.READY,
        expected_agent_null=True,
        new_status=OrderStatus.IN_TRANSIT,
        new_agent_id=agent_id,
        updated_at=at,
    )
    if claimed:
        return

    current = order_repo.get_by_id(order_id)
    if current is None:
        raise EntityNotFoundError(f"Order #{order_id} not found")
    logger.warning(
        "Agent %s lost claim on order #%s (status=%s, agent=%s)",
        agent_id,
        order_id,
        current.status.value,
        current.agent_id,
    )
    raise ClaimConflictError(order_id)


class ClaimDeliveryHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        publisher: EventPublisher | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._publisher = publisher

    def handle(self, order_id: int, agent_id: str) -> OrderDTO:
        if not agent_id or not agent_id.strip():
            raise ValidationError("Agent is required to claim a delivery")
        agent_id = agent_id.strip()

        now = datetime.now(timezone.utc)
        claim_order(self._order_repo, order_id, agent_id, now)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        logger.info("Agent %s claimed order #%s", agent_id, order_id)

        publish_after_commit(
            self._publisher,
            StatusChanged(
                order_id=order_id,
                new_status=OrderStatus.IN_TRANSIT,
                previous_status=OrderStatus.READY,
                restaurant_id=order.restaurant_id,
                customer_id=order.customer_id,
                agent_id=agent_id,
                timestamp=now,
            ),
        )
        return to_order_dto(order)
