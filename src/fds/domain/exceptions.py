"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each subclass is a distinct, machine-readable outcome; none of them is retried
inside the core.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    retryable = False


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class EmptyCartError(DomainException):
    """Checkout was attempted with no cart lines."""


class ItemUnavailableError(DomainException):
    """One or more menu items could not be ordered.

    The whole order request is rejected; nothing is persisted.
    """

    def __init__(self, menu_item_ids: list[str], reason: str | None = None) -> None:
        self.menu_item_ids = list(menu_item_ids)
        joined = ", ".join(self.menu_item_ids)
        message = f"Menu item(s) not available: {joined}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidTransitionError(DomainException):
    """The requested status change is not an edge of the state machine."""

    def __init__(self, current: str, target: str, detail: str | None = None) -> None:
        self.current = current
        self.target = target
        message = f"Cannot move order from {current} to {target}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ForbiddenError(DomainException):
    """The actor may not perform this transition on this order."""


class ClaimConflictError(DomainException):
    """Another agent claimed the order first, or it is no longer ready.

    Callers should refresh the claimable list rather than retry blindly.
    """

    def __init__(self, order_id: int) -> None:
        self.order_id = order_id
        super().__init__(
            f"Order #{order_id} is no longer available for pickup"
        )


class StoreUnavailableError(DomainException):
    """Transactional I/O failed; no state was changed."""

    retryable = True
