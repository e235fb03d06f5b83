"""Integration tests for the CreateOrder use case.

Uses in-memory fake repositories — no file I/O.
"""

import pytest

from fds.application.create_order import CreateOrderHandler
from fds.domain.exceptions import (
    ItemUnavailableError,
    StoreUnavailableError,
    ValidationError,
)
from fds.domain.model.cart import CartLine
from fds.domain.model.catalog import CatalogEntry
from fds.domain.model.events import OrderCreated
from fds.domain.model.value_objects import Money, Quantity
from fds.domain.service.checkout_splitter import split_cart
from tests.fakes import (
    ExplodingPublisher,
    FakeCatalogReader,
    FakeOrderRepository,
    RecordingPublisher,
)

ADDRESS = "Rue Joss, Bonanjo"


def _catalog() -> FakeCatalogReader:
    return FakeCatalogReader([
        CatalogEntry("101", "1", "Ndolé", Money(2500)),
        CatalogEntry("102", "1", "Poulet DG", Money(2000)),
        CatalogEntry("103", "1", "Plantains", Money(500)),
        CatalogEntry("104", "1", "Eru", Money(1500), available=False),
        CatalogEntry("201", "2", "Pizza", Money(4500)),
    ])


def _setup(publisher=None):
    """Build handler with fake repos and a small two-restaurant catalog."""
    order_repo = FakeOrderRepository()
    catalog = _catalog()
    handler = CreateOrderHandler(order_repo, catalog, publisher)
    return handler, order_repo, catalog


def _request(restaurant_id: str, *lines: tuple[str, int, int]):
    """One restaurant's request from (menu_item_id, quantity, cart_price) tuples."""
    (request,) = split_cart(
        CartLine(restaurant_id, item_id, Quantity(qty), Money(price))
        for item_id, qty, price in lines
    )
    return request


class TestCreateOrderHappyPath:

    def test_creates_pending_order_with_catalog_total(self):
        handler, _, _ = _setup()
        dto = handler.handle("cust-1", _request("1", ("101", 2, 2500), ("103", 1, 500)), ADDRESS)
        assert dto.status == "pending"
        assert dto.total_amount == 5500
        assert dto.total == "5,500 XAF"
        assert dto.restaurant_id == "1"
        assert dto.agent_id is None
        assert [i.position for i in dto.items] == [1, 2]

    def test_assigns_sequential_ids(self):
        handler, _, _ = _setup()
        dto1 = handler.handle("cust-1", _request("1", ("101", 1, 2500)), ADDRESS)
        dto2 = handler.handle("cust-2", _request("1", ("102", 1, 2000)), ADDRESS)
        assert dto2.id == dto1.id + 1

    def test_persists_order_and_items(self):
        handler, order_repo, _ = _setup()
        dto = handler.handle("cust-1", _request("1", ("101", 1, 2500)), ADDRESS, "+237 600 00 00")
        saved = order_repo.get_by_id(dto.id)
        assert saved is not None
        assert saved.customer_phone == "+237 600 00 00"
        assert saved.items[0].name == "Ndolé"

    def test_records_payment_method(self):
        handler, _, _ = _setup()
        dto = handler.handle("cust-1", _request("1", ("101", 1, 2500)), ADDRESS, payment_method="momo")
        assert dto.payment_method == "momo"
        assert dto.payment_status == "pending"


class TestCreateOrderPriceLock:

    def test_catalog_price_wins_over_cart_price(self):
        handler, _, _ = _setup()
        dto = handler.handle("cust-1", _request("1", ("101", 2, 100)), ADDRESS)
        assert dto.total_amount == 5000

    def test_price_snapshot_at_creation(self):
        handler, order_repo, catalog = _setup()
        dto = handler.handle("cust-1", _request("1", ("101", 1, 2500)), ADDRESS)

        catalog.set_price("101", 9900)

        saved = order_repo.get_by_id(dto.id)
        assert saved.total == Money(2500)


class TestCreateOrderUnavailableItems:

    def test_unavailable_item_rejects_whole_request(self):
        handler, order_repo, _ = _setup()
        with pytest.raises(ItemUnavailableError) as excinfo:
            handler.handle(
                "cust-1",
                _request("1", ("101", 1, 2500), ("104", 1, 1500), ("103", 1, 500)),
                ADDRESS,
            )
        assert excinfo.value.menu_item_ids == ["104"]
        assert order_repo.count() == 0

    def test_unknown_item_is_unavailable(self):
        handler, order_repo, _ = _setup()
        with pytest.raises(ItemUnavailableError, match="999"):
            handler.handle("cust-1", _request("1", ("999", 1, 100)), ADDRESS)
        assert order_repo.count() == 0

    def test_item_from_another_restaurant_is_unavailable(self):
        handler, _, _ = _setup()
        with pytest.raises(ItemUnavailableError, match="201"):
            handler.handle("cust-1", _request("1", ("201", 1, 4500)), ADDRESS)

    def test_all_offending_items_are_named(self):
        handler, _, _ = _setup()
        with pytest.raises(ItemUnavailableError) as excinfo:
            handler.handle("cust-1", _request("1", ("104", 1, 1), ("999", 1, 1)), ADDRESS)
        assert excinfo.value.menu_item_ids == ["104", "999"]


class TestCreateOrderValidation:

    def test_missing_address_rejected(self):
        handler, order_repo, _ = _setup()
        with pytest.raises(ValidationError, match="address"):
            handler.handle("cust-1", _request("1", ("101", 1, 2500)), "  ")
        assert order_repo.count() == 0


class TestCreateOrderEvents:

    def test_announces_order_created_after_commit(self):
        publisher = RecordingPublisher()
        handler, _, _ = _setup(publisher)
        dto = handler.handle("cust-1", _request("1", ("101", 1, 2500)), ADDRESS)

        (event,) = publisher.events
        assert isinstance(event, OrderCreated)
        assert event.order_id == dto.id
        assert event.restaurant_id == "1"
        assert event.total == Money(2500)

    def test_no_event_when_store_fails(self):
        publisher = RecordingPublisher()
        handler, order_repo, _ = _setup(publisher)
        order_repo.fail_writes = True

        with pytest.raises(StoreUnavailableError):
            handler.handle("cust-1", _request("1", ("101", 1, 2500)), ADDRESS)
        assert publisher.events == []

    def test_no_event_when_rejected(self):
        publisher = RecordingPublisher()
        handler, _, _ = _setup(publisher)
        with pytest.raises(ItemUnavailableError):
            handler.handle("cust-1", _request("1", ("104", 1, 1500)), ADDRESS)
        assert publisher.events == []

    def test_publisher_failure_does_not_fail_the_order(self):
        handler, order_repo, _ = _setup(ExplodingPublisher())
        dto = handler.handle("cust-1", _request("1", ("101", 1, 2500)), ADDRESS)
        assert order_repo.get_by_id(dto.id) is not None
