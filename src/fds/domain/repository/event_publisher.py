"""Abstract outlet for order events."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fds.domain.model.events import OrderEvent


class EventPublisher(ABC):

    @abstractmethod
    def publish(self, event: OrderEvent) -> None:
        """Announce an event to interested subscribers (best effort)."""
