"""End-to-end tests for the fds command line, against temporary data files."""

import json

import pytest
from click.testing import CliRunner

from fds.infrastructure.cli.main import cli

CART = [
    {"restaurant_id": "1", "menu_item_id": "101", "quantity": 2, "price": 2500, "name": "Ndolé"},
    {"restaurant_id": "2", "menu_item_id": "202", "quantity": 1, "price": 1000},
]


@pytest.fixture
def runner(tmp_path, monkeypatch):
    (tmp_path / "catalog.json").write_text(json.dumps([
        {"id": "101", "restaurant_id": "1", "name": "Ndolé", "price": 2500, "is_available": True},
        {"id": "202", "restaurant_id": "2", "name": "Soya", "price": 1000, "is_available": True},
        {"id": "203", "restaurant_id": "2", "name": "Poulet DG", "price": 5000, "is_available": False},
    ]))
    (tmp_path / "restaurants.json").write_text(json.dumps([
        {"id": "1", "owner_id": "owner-1"},
        {"id": "2", "owner_id": "owner-2"},
    ]))
    monkeypatch.setenv("FDS_DATA_DIR", str(tmp_path))
    for name in ("FDS_DATABASE", "FDS_CATALOG_FILE", "FDS_RESTAURANTS_FILE", "FDS_STORE_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


def _invoke(runner, *args, input=None):
    return runner.invoke(cli, list(args), input=input)


def _checkout(runner, cart=None):
    return _invoke(
        runner,
        "order", "checkout", "--customer", "cust-1", "--address", "Akwa", "--cart", "-",
        input=json.dumps(cart if cart is not None else CART),
    )


def _advance(runner, order_id, status, role, actor_id, *extra):
    return _invoke(
        runner, "order", "advance", "--id", str(order_id), "--status", status,
        "--as-role", role, "--as-id", actor_id, *extra,
    )


class TestOrderCommands:

    def test_checkout_creates_one_order_per_restaurant(self, runner):
        result = _checkout(runner)
        assert result.exit_code == 0, result.output
        assert "Order #1 created for restaurant 1" in result.output
        assert "total=5,000 XAF" in result.output
        assert "Order #2 created for restaurant 2" in result.output

    def test_checkout_with_unavailable_item(self, runner):
        result = _checkout(runner, [
            {"restaurant_id": "2", "menu_item_id": "203", "quantity": 1, "price": 5000},
        ])
        assert result.exit_code == 1
        assert "ItemUnavailableError" in result.output
        assert "203" in result.output

    def test_checkout_with_empty_cart(self, runner):
        result = _checkout(runner, [])
        assert result.exit_code == 1
        assert "EmptyCartError" in result.output

    def test_checkout_with_malformed_cart(self, runner):
        result = _invoke(
            runner, "order", "checkout", "--customer", "c", "--address", "a", "--cart", "-",
            input="{not json",
        )
        assert result.exit_code == 2
        assert "not valid JSON" in result.output

    def test_show(self, runner):
        _checkout(runner)
        result = _invoke(runner, "order", "show", "--id", "1")
        assert result.exit_code == 0, result.output
        assert "Order #1  (status=pending)" in result.output
        assert "Ndol" in result.output
        assert "5,000 XAF" in result.output

    def test_show_missing(self, runner):
        result = _invoke(runner, "order", "show", "--id", "99")
        assert result.exit_code == 1
        assert "EntityNotFoundError" in result.output

    def test_advance(self, runner):
        _checkout(runner)
        result = _advance(runner, 1, "preparing", "owner", "owner-1")
        assert result.exit_code == 0, result.output
        assert "Order #1 is now preparing." in result.output

    def test_advance_by_wrong_owner(self, runner):
        _checkout(runner)
        result = _advance(runner, 1, "preparing", "owner", "owner-2")
        assert result.exit_code == 1
        assert "ForbiddenError" in result.output

    def test_customer_cannot_cancel_preparing_order(self, runner):
        _checkout(runner)
        _advance(runner, 1, "preparing", "owner", "owner-1")
        result = _advance(runner, 1, "cancelled", "customer", "cust-1")
        assert result.exit_code == 1
        assert "InvalidTransitionError" in result.output

    def test_list_requires_exactly_one_filter(self, runner):
        result = _invoke(runner, "order", "list")
        assert result.exit_code == 2

    def test_list_by_customer(self, runner):
        _checkout(runner)
        result = _invoke(runner, "order", "list", "--customer", "cust-1")
        assert result.exit_code == 0, result.output
        assert result.output.count("pending") == 2


class TestDeliveryCommands:

    def _make_ready(self, runner):
        _checkout(runner)
        _advance(runner, 1, "preparing", "owner", "owner-1")
        _advance(runner, 1, "ready", "owner", "owner-1")

    def test_available_when_empty(self, runner):
        result = _invoke(runner, "delivery", "available")
        assert result.exit_code == 0
        assert "No deliveries available" in result.output

    def test_claim_and_complete(self, runner):
        self._make_ready(runner)

        available = _invoke(runner, "delivery", "available")
        assert "ready" in available.output

        claimed = _invoke(runner, "delivery", "claim", "--id", "1", "--agent", "agent-1")
        assert claimed.exit_code == 0, claimed.output
        assert "claimed by agent agent-1" in claimed.output

        done = _invoke(runner, "delivery", "complete", "--id", "1", "--agent", "agent-1")
        assert done.exit_code == 0, done.output
        assert "Order #1 delivered." in done.output

        summary = _invoke(runner, "delivery", "summary", "--agent", "agent-1")
        assert "Completed deliveries: 1" in summary.output
        assert "500 XAF" in summary.output

    def test_second_claim_conflicts(self, runner):
        self._make_ready(runner)
        _invoke(runner, "delivery", "claim", "--id", "1", "--agent", "agent-1")
        result = _invoke(runner, "delivery", "claim", "--id", "1", "--agent", "agent-2")
        assert result.exit_code == 1
        assert "ClaimConflictError" in result.output
        assert "fds delivery available" in result.output

    def test_other_agent_cannot_complete(self, runner):
        self._make_ready(runner)
        _invoke(runner, "delivery", "claim", "--id", "1", "--agent", "agent-1")
        result = _invoke(runner, "delivery", "complete", "--id", "1", "--agent", "agent-2")
        assert result.exit_code == 1
        assert "ForbiddenError" in result.output

    def test_mine(self, runner):
        self._make_ready(runner)
        _invoke(runner, "delivery", "claim", "--id", "1", "--agent", "agent-1")
        result = _invoke(runner, "delivery", "mine", "--agent", "agent-1")
        assert "in_transit" in result.output


class TestRestaurantCommands:

    def test_summary(self, runner):
        _checkout(runner)
        result = _invoke(runner, "restaurant", "summary", "--restaurant", "1")
        assert result.exit_code == 0, result.output
        assert "Orders today:   1" in result.output
        assert "Open orders:    1" in result.output
        assert "Total revenue:  0 XAF" in result.output


class TestConfiguration:

    def test_bad_timeout_is_reported(self, runner, monkeypatch):
        monkeypatch.setenv("FDS_STORE_TIMEOUT", "later")
        result = _invoke(runner, "delivery", "available")
        assert result.exit_code == 1
        assert "FDS_STORE_TIMEOUT" in result.output
