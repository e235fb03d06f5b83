"""Announcing events once a write has committed.

The broadcast is a convenience for connected clients; the store is the
source of truth. A failing publisher is logged and does not undo or fail
the operation that already committed.
"""

from __future__ import annotations

import logging

from fds.domain.model.events import OrderEvent
from fds.domain.repository.event_publisher import EventPublisher

logger = logging.getLogger(__name__)


def publish_after_commit(publisher: EventPublisher | None, event: OrderEvent) -> None:
    if publisher is None:
        return
    try:
        publisher.publish(event)
    except Exception:
        logger.exception(
            "Failed to publish %s for order #%s",
            type(event).__name__,
            event.order_id,
        )
