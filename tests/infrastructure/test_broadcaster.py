"""Tests for the in-process dispatch broadcaster."""

import threading

import pytest

from fds.domain.exceptions import ValidationError
from fds.domain.model.events import OrderCreated, StatusChanged
from fds.domain.model.order import OrderStatus
from fds.domain.model.value_objects import Money
from fds.infrastructure.events.broadcaster import DispatchBroadcaster

S = OrderStatus


def _created(order_id: int = 1, restaurant_id: str = "1", customer_id: str = "cust-1"):
    return OrderCreated(order_id, restaurant_id, customer_id, Money(2500))


def _changed(
    new: OrderStatus,
    previous: OrderStatus,
    order_id: int = 1,
    restaurant_id: str = "1",
    customer_id: str = "cust-1",
    agent_id: str | None = None,
):
    return StatusChanged(order_id, new, previous, restaurant_id, customer_id, agent_id)


class TestSubscriptionScopes:

    def test_restaurant_scope(self):
        hub = DispatchBroadcaster()
        sub = hub.subscribe(restaurant_id="1")
        hub.publish(_created(1, restaurant_id="1"))
        hub.publish(_created(2, restaurant_id="2"))
        assert [e.order_id for e in sub.drain()] == [1]

    def test_customer_scope(self):
        hub = DispatchBroadcaster()
        sub = hub.subscribe(customer_id="cust-1")
        hub.publish(_changed(S.PREPARING, S.PENDING, customer_id="cust-1"))
        hub.publish(_changed(S.PREPARING, S.PENDING, order_id=2, customer_id="cust-2"))
        assert [e.order_id for e in sub.drain()] == [1]

    def test_agent_scope_sees_own_deliveries_only(self):
        hub = DispatchBroadcaster()
        sub = hub.subscribe(agent_id="agent-1")
        hub.publish(_created())
        hub.publish(_changed(S.IN_TRANSIT, S.READY, agent_id="agent-1"))
        hub.publish(_changed(S.IN_TRANSIT, S.READY, order_id=2, agent_id="agent-2"))
        assert [e.order_id for e in sub.drain()] == [1]

    def test_pool_sees_orders_entering_and_leaving_ready(self):
        hub = DispatchBroadcaster()
        pool = hub.subscribe(agent_pool=True)
        hub.publish(_created(1))
        hub.publish(_changed(S.PREPARING, S.PENDING, order_id=1))
        hub.publish(_changed(S.READY, S.PREPARING, order_id=1))
        hub.publish(_changed(S.IN_TRANSIT, S.READY, order_id=1, agent_id="agent-1"))
        hub.publish(_changed(S.DELIVERED, S.IN_TRANSIT, order_id=1, agent_id="agent-1"))

        events = pool.drain()
        assert [type(e).__name__ for e in events] == ["OrderCreated", "StatusChanged", "StatusChanged"]
        assert [e.new_status for e in events[1:]] == [S.READY, S.IN_TRANSIT]

    def test_everything_scope(self):
        hub = DispatchBroadcaster()
        sub = hub.subscribe(everything=True)
        hub.publish(_created(1))
        hub.publish(_changed(S.CANCELLED, S.PENDING, order_id=2, restaurant_id="9"))
        assert len(sub.drain()) == 2

    def test_combined_scopes_deliver_once(self):
        hub = DispatchBroadcaster()
        sub = hub.subscribe(restaurant_id="1", customer_id="cust-1")
        hub.publish(_created())
        assert len(sub.drain()) == 1

    def test_empty_scope_rejected(self):
        with pytest.raises(ValidationError, match="at least one scope"):
            DispatchBroadcaster().subscribe()


class TestDelivery:

    def test_events_arrive_in_publish_order(self):
        hub = DispatchBroadcaster()
        sub = hub.subscribe(restaurant_id="1")
        for order_id in range(1, 6):
            hub.publish(_created(order_id))
        assert [e.order_id for e in sub] == [1, 2, 3, 4, 5]

    def test_get_times_out_with_none(self):
        sub = DispatchBroadcaster().subscribe(everything=True)
        assert sub.get(timeout=0.01) is None

    def test_get_waits_for_publish_from_another_thread(self):
        hub = DispatchBroadcaster()
        sub = hub.subscribe(customer_id="cust-1")
        threading.Timer(0.05, hub.publish, args=(_created(),)).start()
        event = sub.get(timeout=2.0)
        assert event is not None and event.order_id == 1

    def test_publish_with_no_subscribers_is_a_no_op(self):
        DispatchBroadcaster().publish(_created())

    def test_each_subscriber_gets_its_own_copy(self):
        hub = DispatchBroadcaster()
        first = hub.subscribe(restaurant_id="1")
        second = hub.subscribe(restaurant_id="1")
        hub.publish(_created())
        assert len(first.drain()) == 1
        assert len(second.drain()) == 1


class TestRegistry:

    def test_unsubscribed_client_misses_events(self):
        hub = DispatchBroadcaster()
        sub = hub.subscribe(restaurant_id="1")
        sub.close()
        hub.publish(_created())
        assert sub.drain() == []

    def test_context_manager_disconnects(self):
        hub = DispatchBroadcaster()
        with hub.subscribe(agent_pool=True) as sub:
            pass
        hub.publish(_changed(S.READY, S.PREPARING))
        assert sub.drain() == []

    def test_unsubscribe_twice_is_harmless(self):
        hub = DispatchBroadcaster()
        sub = hub.subscribe(everything=True)
        hub.unsubscribe(sub)
        hub.unsubscribe(sub)
        hub.publish(_created())
        assert sub.drain() == []

    def test_no_replay_for_late_subscribers(self):
        hub = DispatchBroadcaster()
        hub.publish(_created())
        late = hub.subscribe(everything=True)
        assert late.drain() == []
