import logging

import click

from fds.infrastructure.bootstrap import settings
from fds.infrastructure.cli.delivery_commands import (
    delivery_available,
    delivery_claim,
    delivery_complete,
    delivery_mine,
    delivery_summary,
)
from fds.infrastructure.cli.order_commands import (
    order_advance,
    order_checkout,
    order_list,
    order_show,
)
from fds.infrastructure.cli.restaurant_commands import restaurant_summary

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


@click.group()
@click.option("--log-level", default=None, help="Override FDS_LOG_LEVEL (e.g. INFO, DEBUG).")
def cli(log_level: str | None) -> None:
    """FDS — Food Dispatch System"""
    try:
        level = (log_level or settings().log_level).upper()
        logging.basicConfig(level=level, format=LOG_FORMAT)
    except ValueError as exc:
        raise click.ClickException(str(exc))


@cli.group()
def order() -> None:
    """Place and manage orders."""


@cli.group()
def delivery() -> None:
    """Claim and complete deliveries."""


@cli.group()
def restaurant() -> None:
    """Restaurant dashboards."""


# Register subcommands
order.add_command(order_advance)
order.add_command(order_checkout)
order.add_command(order_list)
order.add_command(order_show)
delivery.add_command(delivery_available)
delivery.add_command(delivery_claim)
delivery.add_command(delivery_complete)
delivery.add_command(delivery_mine)
delivery.add_command(delivery_summary)
restaurant.add_command(restaurant_summary)
