"""Abstract lookup of restaurant ownership."""

from __future__ import annotations

from abc import ABC, abstractmethod


class RestaurantDirectory(ABC):

    @abstractmethod
    def get_owner_id(self, restaurant_id: str) -> str | None:
        """Return the id of the user owning a restaurant, or None."""
