"""In-process Dispatch Broadcaster.

Fans order events out to the subscriptions connected right now. Each
subscription owns an unbounded queue, so publishing never blocks on a
slow consumer. Nothing is persisted: events published while a client is
disconnected are simply not seen by it, and the client re-reads current
state through the query handlers after reconnecting.

The registry lock is held only to copy or change the subscription list,
never while events are being delivered.
"""

from __future__ import annotations

import logging
import queue
import threading
import uuid
from collections.abc import Iterator
from dataclasses import dataclass

from fds.domain.exceptions import ValidationError
from fds.domain.model.events import OrderCreated, OrderEvent
from fds.domain.model.order import OrderStatus
from fds.domain.repository.event_publisher import EventPublisher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubscriptionScope:
    """Which events a subscriber is interested in.

    A subscription matches an event if *any* of its scopes does.
    """

    restaurant_id: str | None = None
    customer_id: str | None = None
    agent_id: str | None = None
    agent_pool: bool = False
    everything: bool = False

    @property
    def is_empty(self) -> bool:
        return not (
            self.restaurant_id
            or self.customer_id
            or self.agent_id
            or self.agent_pool
            or self.everything
        )

    def matches(self, event: OrderEvent) -> bool:
        if self.everything:
            return True
        if self.restaurant_id is not None and event.restaurant_id == self.restaurant_id:
            return True
        if self.customer_id is not None and event.customer_id == self.customer_id:
            return True
        if isinstance(event, OrderCreated):
            # The pool hears about new orders so it can watch them get ready
            return self.agent_pool
        if self.agent_id is not None and event.agent_id == self.agent_id:
            return True
        return self.agent_pool and OrderStatus.READY in (
            event.new_status,
            event.previous_status,
        )


class Subscription:
    """A live connection to the broadcaster."""

    def __init__(self, broadcaster: DispatchBroadcaster, scope: SubscriptionScope) -> None:
        self.id = uuid.uuid4().hex
        self.scope = scope
        self._broadcaster = broadcaster
        self._queue: queue.Queue[OrderEvent] = queue.Queue()

    def deliver(self, event: OrderEvent) -> None:
        self._queue.put(event)

    def get(self, timeout: float | None = None) -> OrderEvent | None:
        """Wait up to ``timeout`` seconds for the next event (None on timeout)."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> list[OrderEvent]:
        """Return every event delivered so far without waiting."""
        events: list[OrderEvent] = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                return events

    def close(self) -> None:
        self._broadcaster.unsubscribe(self)

    def __iter__(self) -> Iterator[OrderEvent]:
        return iter(self.drain())

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class DispatchBroadcaster(EventPublisher):

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: dict[str, Subscription] = {}

    # --- Registry ---------------------------------------------------------------

    def subscribe(
        self,
        restaurant_id: str | None = None,
        customer_id: str | None = None,
        agent_id: str | None = None,
        agent_pool: bool = False,
        everything: bool = False,
    ) -> Subscription:
        scope = SubscriptionScope(
            restaurant_id=restaurant_id,
            customer_id=customer_id,
            agent_id=agent_id,
            agent_pool=agent_pool,
            everything=everything,
        )
        if scope.is_empty:
            raise ValidationError("A subscription needs at least one scope")

        subscription = Subscription(self, scope)
        with self._lock:
            self._subscriptions[subscription.id] = subscription
        logger.debug("Subscription %s connected with %s", subscription.id, scope)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscriptions.pop(subscription.id, None)
        logger.debug("Subscription %s disconnected", subscription.id)

    # --- EventPublisher interface -----------------------------------------------

    def publish(self, event: OrderEvent) -> None:
        with self._lock:
            targets = list(self._subscriptions.values())

        delivered = 0
        for subscription in targets:
            if subscription.scope.matches(event):
                subscription.deliver(event)
                delivered += 1

        logger.debug(
            "%s for order #%s delivered to %d of %d subscriber(s)",
            type(event).__name__,
            event.order_id,
            delivered,
            len(targets),
        )
