"""CLI commands for the Order aggregate."""

from __future__ import annotations

import json

import click

from fds.application.checkout import CheckoutHandler
from fds.application.create_order import CreateOrderHandler
from fds.application.dto import CartLineSpec
from fds.application.list_orders import ListByCustomerHandler, ListByRestaurantHandler
from fds.application.show_order import ShowOrderHandler
from fds.application.transition_order import TransitionOrderHandler
from fds.domain.exceptions import DomainException
from fds.domain.model.actor import Actor
from fds.domain.model.order import OrderStatus
from fds.infrastructure.bootstrap import (
    broadcaster,
    catalog_reader,
    order_repository,
    restaurant_directory,
)
from fds.infrastructure.cli.output import display_order, display_order_rows, domain_error


def _parse_cart(raw: str) -> list[CartLineSpec]:
    """Parse a JSON list of cart lines into CartLineSpecs."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"Cart is not valid JSON: {exc}")
    if not isinstance(data, list):
        raise click.BadParameter("Cart must be a JSON list of lines.")

    specs: list[CartLineSpec] = []
    for index, line in enumerate(data, start=1):
        try:
            specs.append(
                CartLineSpec(
                    restaurant_id=str(line["restaurant_id"]),
                    menu_item_id=str(line["menu_item_id"]),
                    quantity=int(line["quantity"]),
                    price=int(line["price"]),
                    name=line.get("name", ""),
                    image=line.get("image", ""),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise click.BadParameter(f"Invalid cart line {index}: {exc!r}")
    return specs


@click.command("checkout")
@click.option("--customer", required=True, help="Customer ID.")
@click.option("--address", required=True, help="Delivery address.")
@click.option("--phone", default="", help="Customer contact phone.")
@click.option("--cart", "cart_file", required=True, type=click.File("r"), help="Cart JSON file ('-' for stdin).")
@click.option("--payment-method", default="cash", show_default=True, help="Payment method (recorded as-is).")
def order_checkout(customer: str, address: str, phone: str, cart_file, payment_method: str) -> None:
    """Place one order per restaurant in the cart."""
    specs = _parse_cart(cart_file.read())

    handler = CheckoutHandler(
        CreateOrderHandler(
            order_repo=order_repository(),
            catalog=catalog_reader(),
            publisher=broadcaster(),
        )
    )

    try:
        created = handler.handle(
            customer_id=customer,
            cart=specs,
            delivery_address=address,
            customer_phone=phone,
            payment_method=payment_method,
        )
    except DomainException as exc:
        raise domain_error(exc)

    for dto in created:
        click.echo(f"Order #{dto.id} created for restaurant {dto.restaurant_id}  (total={dto.total})")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise domain_error(exc)

    display_order(dto)


@click.command("advance")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to change.")
@click.option(
    "--status",
    required=True,
    type=click.Choice([s.value for s in OrderStatus]),
    help="Target status.",
)
@click.option("--as-role", "role", required=True, type=click.Choice(["customer", "owner", "agent", "admin"]), help="Acting role.")
@click.option("--as-id", "actor_id", required=True, help="Acting user ID.")
@click.option("--agent", "agent_id", default=None, help="Agent to assign (admin only, ready -> in_transit).")
def order_advance(order_id: int, status: str, role: str, actor_id: str, agent_id: str | None) -> None:
    """Move an order to another status."""
    handler = TransitionOrderHandler(
        order_repo=order_repository(),
        restaurants=restaurant_directory(),
        publisher=broadcaster(),
    )

    try:
        dto = handler.handle(order_id, Actor.of(role, actor_id), status, agent_id=agent_id)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Order #{dto.id} is now {dto.status}.")


@click.command("list")
@click.option("--customer", default=None, help="List a customer's orders.")
@click.option("--restaurant", default=None, help="List a restaurant's orders.")
def order_list(customer: str | None, restaurant: str | None) -> None:
    """List orders for a customer or a restaurant (newest first)."""
    if (customer is None) == (restaurant is None):
        raise click.UsageError("Give exactly one of --customer or --restaurant.")

    try:
        if customer is not None:
            orders = ListByCustomerHandler(order_repository()).handle(customer)
        else:
            orders = ListByRestaurantHandler(order_repository()).handle(restaurant)
    except DomainException as exc:
        raise domain_error(exc)

    display_order_rows(orders, empty="No orders.")
