"""Shared formatting for CLI commands."""

from __future__ import annotations

import click

from fds.application.dto import OrderDTO
from fds.domain.exceptions import DomainException


def domain_error(exc: DomainException) -> click.ClickException:
    """Turn a domain error into a CLI error that names its outcome."""
    hint = " (safe to retry)" if exc.retryable else ""
    return click.ClickException(f"{type(exc).__name__}: {exc}{hint}")


def display_order(dto: OrderDTO) -> None:
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Restaurant: {dto.restaurant_id}")
    click.echo(f"Customer:   {dto.customer_id}  {dto.customer_phone}")
    click.echo(f"Deliver to: {dto.delivery_address}")
    if dto.agent_id:
        click.echo(f"Agent:      {dto.agent_id}")
    click.echo(f"Payment:    {dto.payment_method} ({dto.payment_status})")
    click.echo(f"Created:    {dto.created_at}")
    click.echo(f"Updated:    {dto.updated_at}")
    click.echo()
    click.echo(f"  {'Item':<24} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*56}")
    for item in dto.items:
        click.echo(
            f"  {item.name or item.menu_item_id:<24} {item.quantity:>5} "
            f"{item.unit_price:>12} {item.line_total:>12}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Order Total':<30} {dto.total:>25}")


def display_order_rows(orders: list[OrderDTO], empty: str) -> None:
    if not orders:
        click.echo(empty)
        return
    click.echo(f"  {'ID':>5}  {'Status':<11} {'Restaurant':<12} {'Agent':<10} {'Total':>14}  Created")
    click.echo(f"  {'-'*78}")
    for dto in orders:
        click.echo(
            f"  {dto.id:>5}  {dto.status:<11} {dto.restaurant_id:<12} "
            f"{dto.agent_id or '-':<10} {dto.total:>14}  {dto.created_at}"
        )
