"""Application service: Transition Order use case.

Validates the requested edge and the actor against ``transition_policy``,
then commits the change as one conditional write. ``ready -> in_transit``
is a claim and shares the claim write with ClaimDeliveryHandler.

A write that matches no row means another request changed the order
between our read and our write; the call is rejected and the order is
left exactly as the winner wrote it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fds.application.claim_delivery import claim_order
from fds.application.dto import OrderDTO, to_order_dto
from fds.application.publishing import publish_after_commit
from fds.domain.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    InvalidTransitionError,
    ValidationError,
)
from fds.domain.model.actor import Actor, ActorRole
from fds.domain.model.events import StatusChanged
from fds.domain.model.order import Order, OrderStatus
from fds.domain.repository.event_publisher import EventPublisher
from fds.domain.repository.order_repository import OrderRepository
from fds.domain.repository.restaurant_directory import RestaurantDirectory
from fds.domain.service.transition_policy import CLAIM_EDGE, check_transition

logger = logging.getLogger(__name__)


class TransitionOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        restaurants: RestaurantDirectory,
        publisher: EventPublisher | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._restaurants = restaurants
        self._publisher = publisher

    def handle(
        self,
        order_id: int,
        actor: Actor,
        target_status: OrderStatus | str,
        agent_id: str | None = None,
    ) -> OrderDTO:
        """Move an order to ``target_status`` on behalf of ``actor``.

        Args:
            order_id: The order to change.
            actor: Who is asking.
            target_status: The requested status.
            agent_id: Only for an admin assigning a ready order; names
                the agent who will deliver it.
        """
        target = self._parse_status(target_status)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        owner_id = None
        if actor.role is ActorRole.OWNER:
            owner_id = self._restaurants.get_owner_id(order.restaurant_id)

        check_transition(order, target, actor, owner_id)

        now = datetime.now(timezone.utc)
        assignee = order.agent_id
        if (order.status, target) == CLAIM_EDGE:
            assignee = self._resolve_assignee(actor, agent_id)
            claim_order(self._order_repo, order_id, assignee, now)
        else:
            if agent_id is not None:
                raise ValidationError(
                    "An agent can only be named when assigning a ready order"
                )
            self._apply(order, target, now)

        updated = self._order_repo.get_by_id(order_id)
        if updated is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        logger.info(
            "Order #%s moved %s -> %s by %s %s",
            order_id,
            order.status.value,
            target.value,
            actor.role.value,
            actor.id,
        )

        # Event reflects this write, not the re-read
        publish_after_commit(
            self._publisher,
            StatusChanged(
                order_id=order_id,
                new_status=target,
                previous_status=order.status,
                restaurant_id=order.restaurant_id,
                customer_id=order.customer_id,
                agent_id=assignee,
                timestamp=now,
            ),
        )
        return to_order_dto(updated)

    # --- Internal helpers -----------------------------------------------------

    def _apply(self, order: Order, target: OrderStatus, now: datetime) -> None:
        applied = self._order_repo.update_status(
            order.id,  # type: ignore[arg-type]
            expected_status=order.status,
            expected_agent_null=order.agent_id is None,
            new_status=target,
            new_agent_id=None,
            updated_at=now,
        )
        if applied:
            return

        current = self._order_repo.get_by_id(order.id)  # type: ignore[arg-type]
        now_status = current.status.value if current else "missing"
        logger.warning(
            "Stale transition of order #%s %s -> %s rejected (now %s)",
            order.id,
            order.status.value,
            target.value,
            now_status,
        )
        raise InvalidTransitionError(
            order.status.value,
            target.value,
            f"order changed concurrently (now {now_status})",
        )

    @staticmethod
    def _resolve_assignee(actor: Actor, agent_id: str | None) -> str:
        if actor.role is ActorRole.AGENT:
            if agent_id is not None and agent_id != actor.id:
                raise ForbiddenError("Agents can only claim deliveries for themselves")
            return actor.id
        if not agent_id or not agent_id.strip():
            raise ValidationError("An agent must be named to assign this delivery")
        return agent_id.strip()

    @staticmethod
    def _parse_status(value: OrderStatus | str) -> OrderStatus:
        if isinstance(value, OrderStatus):
            return value
        try:
            return OrderStatus(value.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(
                f"Unknown status {value!r} (expected one of: {allowed})"
            ) from exc
