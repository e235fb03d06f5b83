"""Domain service: order status transitions and who may perform them.

Everything here is a pure function of the order, the target status and
the actor, so it can be tested without a store or a transport.

Two kinds of refusal are distinguished:

- ``InvalidTransitionError`` when the edge does not exist, either at all
  or for the actor's role (a customer has no ``preparing -> cancelled``
  edge, whoever's order it is).
- ``ForbiddenError`` when the role may use the edge but the actor does
  not own the order in the required way (another restaurant's owner, an
  agent who is not the one assigned).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fds.domain.exceptions import ForbiddenError, InvalidTransitionError
from fds.domain.model.actor import Actor, ActorRole
from fds.domain.model.order import Order, OrderStatus


class Party(Enum):
    PLACING_CUSTOMER = "placing customer"
    RESTAURANT_OWNER = "restaurant owner"
    ANY_AGENT = "any agent"
    ASSIGNED_AGENT = "assigned agent"
    ADMIN = "admin"


Edge = tuple[OrderStatus, OrderStatus]

_S = OrderStatus
_P = Party

TRANSITIONS: dict[Edge, frozenset[Party]] = {
    (_S.PENDING, _S.PREPARING): frozenset({_P.RESTAURANT_OWNER, _P.ADMIN}),
    (_S.PENDING, _S.CANCELLED): frozenset(
        {_P.PLACING_CUSTOMER, _P.RESTAURANT_OWNER, _P.ADMIN}
    ),
    (_S.PREPARING, _S.READY): frozenset({_P.RESTAURANT_OWNER, _P.ADMIN}),
    (_S.PREPARING, _S.CANCELLED): frozenset({_P.RESTAURANT_OWNER, _P.ADMIN}),
    (_S.READY, _S.IN_TRANSIT): frozenset({_P.ANY_AGENT, _P.ADMIN}),
    (_S.IN_TRANSIT, _S.DELIVERED): frozenset({_P.ASSIGNED_AGENT, _P.ADMIN}),
    (_S.IN_TRANSIT, _S.CANCELLED): frozenset({_P.ADMIN}),
}

CLAIM_EDGE: Edge = (_S.READY, _S.IN_TRANSIT)

_ROLE_PARTIES: dict[ActorRole, frozenset[Party]] = {
    ActorRole.CUSTOMER: frozenset({_P.PLACING_CUSTOMER}),
    ActorRole.OWNER: frozenset({_P.RESTAURANT_OWNER}),
    ActorRole.AGENT: frozenset({_P.ANY_AGENT, _P.ASSIGNED_AGENT}),
    ActorRole.ADMIN: frozenset({_P.ADMIN}),
}


@dataclass(frozen=True)
class Ownership:
    """How the actor relates to the order being changed."""

    placed_order: bool = False
    owns_restaurant: bool = False
    assigned_agent: bool = False


def is_edge(current: OrderStatus, target: OrderStatus) -> bool:
    return (current, target) in TRANSITIONS


def allowed_targets(current: OrderStatus) -> list[OrderStatus]:
    """Statuses reachable from ``current`` by someone."""
    return [to for (frm, to) in TRANSITIONS if frm == current]


def role_may_use(edge: Edge, role: ActorRole) -> bool:
    """True if the edge exists and names at least one party of ``role``."""
    parties = TRANSITIONS.get(edge, frozenset())
    return bool(parties & _ROLE_PARTIES[role])


def is_authorized(edge: Edge, role: ActorRole, ownership: Ownership) -> bool:
    """Allow/deny for an actor of ``role`` with ``ownership`` on ``edge``."""
    parties = TRANSITIONS.get(edge, frozenset()) & _ROLE_PARTIES[role]
    for party in parties:
        if party in (_P.ADMIN, _P.ANY_AGENT):
            return True
        if party is _P.PLACING_CUSTOMER and ownership.placed_order:
            return True
        if party is _P.RESTAURANT_OWNER and ownership.owns_restaurant:
            return True
        if party is _P.ASSIGNED_AGENT and ownership.assigned_agent:
            return True
    return False


def ownership_of(
    order: Order, actor: Actor, restaurant_owner_id: str | None
) -> Ownership:
    return Ownership(
        placed_order=(
            actor.role is ActorRole.CUSTOMER and order.customer_id == actor.id
        ),
        owns_restaurant=(
            actor.role is ActorRole.OWNER
            and restaurant_owner_id is not None
            and restaurant_owner_id == actor.id
        ),
        assigned_agent=(
            actor.role is ActorRole.AGENT
            and order.agent_id is not None
            and order.agent_id == actor.id
        ),
    )


def check_transition(
    order: Order,
    target: OrderStatus,
    actor: Actor,
    restaurant_owner_id: str | None,
) -> None:
    """Raise unless ``actor`` may move ``order`` to ``target`` right now."""
    edge = (order.status, target)
    if not is_edge(order.status, target):
        raise InvalidTransitionError(
            order.status.value, target.value, _no_edge_detail(order)
        )

    if not role_may_use(edge, actor.role):
        raise InvalidTransitionError(
            order.status.value,
            target.value,
            f"not a transition available to role '{actor.role.value}'",
        )

    ownership = ownership_of(order, actor, restaurant_owner_id)
    if not is_authorized(edge, actor.role, ownership):
        raise ForbiddenError(
            f"{actor.role.value} '{actor.id}' is not authorized to move "
            f"order #{order.id} from {order.status.value} to {target.value}"
        )


def _no_edge_detail(order: Order) -> str:
    if order.is_terminal:
        return f"order is already {order.status.value}"
    targets = ", ".join(s.value for s in allowed_targets(order.status))
    return f"next status can be {targets}"
