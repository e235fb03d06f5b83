"""CLI commands for restaurant owners."""

from __future__ import annotations

import click

from fds.application.restaurant_summary import RestaurantSummaryHandler
from fds.domain.exceptions import DomainException
from fds.infrastructure.bootstrap import order_repository
from fds.infrastructure.cli.output import domain_error


@click.command("summary")
@click.option("--restaurant", "restaurant_id", required=True, help="Restaurant ID.")
def restaurant_summary(restaurant_id: str) -> None:
    """Show today's orders, open orders and revenue."""
    try:
        summary = RestaurantSummaryHandler(order_repository()).handle(restaurant_id)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Restaurant {summary.restaurant_id}")
    click.echo(f"  Orders today:   {summary.orders_today}")
    click.echo(f"  Open orders:    {summary.open_orders}")
    click.echo(f"  Revenue today:  {summary.today_revenue}")
    click.echo(f"  Total revenue:  {summary.total_revenue}")
