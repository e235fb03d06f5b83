"""CLI commands for delivery agents."""

from __future__ import annotations

import click

from fds.application.agent_summary import AgentSummaryHandler
from fds.application.claim_delivery import ClaimDeliveryHandler
from fds.application.list_orders import ListByAgentHandler, ListClaimableHandler
from fds.application.transition_order import TransitionOrderHandler
from fds.domain.exceptions import ClaimConflictError, DomainException
from fds.domain.model.actor import Actor, ActorRole
from fds.domain.model.order import OrderStatus
from fds.infrastructure.bootstrap import broadcaster, order_repository, restaurant_directory
from fds.infrastructure.cli.output import display_order_rows, domain_error


@click.command("available")
def delivery_available() -> None:
    """List orders waiting for an agent (oldest first)."""
    try:
        orders = ListClaimableHandler(order_repository()).handle()
    except DomainException as exc:
        raise domain_error(exc)

    display_order_rows(orders, empty="No deliveries available right now.")


@click.command("claim")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to claim.")
@click.option("--agent", "agent_id", required=True, help="Agent ID.")
def delivery_claim(order_id: int, agent_id: str) -> None:
    """Claim a ready order for delivery."""
    handler = ClaimDeliveryHandler(order_repo=order_repository(), publisher=broadcaster())

    try:
        dto = handler.handle(order_id, agent_id)
    except ClaimConflictError as exc:
        raise click.ClickException(
            f"{type(exc).__name__}: {exc}. Run 'fds delivery available' to pick another order."
        )
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Order #{dto.id} claimed by agent {dto.agent_id}; deliver to {dto.delivery_address}.")


@click.command("complete")
@click.option("--id", "order_id", required=True, type=int, help="Order ID delivered.")
@click.option("--agent", "agent_id", required=True, help="Agent ID.")
def delivery_complete(order_id: int, agent_id: str) -> None:
    """Mark a claimed order as delivered."""
    handler = TransitionOrderHandler(
        order_repo=order_repository(),
        restaurants=restaurant_directory(),
        publisher=broadcaster(),
    )

    try:
        handler.handle(order_id, Actor(ActorRole.AGENT, agent_id), OrderStatus.DELIVERED)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Order #{order_id} delivered.")


@click.command("mine")
@click.option("--agent", "agent_id", required=True, help="Agent ID.")
def delivery_mine(agent_id: str) -> None:
    """List every order assigned to an agent."""
    try:
        orders = ListByAgentHandler(order_repository()).handle(agent_id)
    except DomainException as exc:
        raise domain_error(exc)

    display_order_rows(orders, empty="No deliveries yet.")


@click.command("summary")
@click.option("--agent", "agent_id", required=True, help="Agent ID.")
def delivery_summary(agent_id: str) -> None:
    """Show an agent's delivery counts and estimated earnings."""
    try:
        summary = AgentSummaryHandler(order_repository()).handle(agent_id)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Agent {summary.agent_id}")
    click.echo(f"  Active deliveries:    {summary.active_deliveries}")
    click.echo(f"  Completed deliveries: {summary.completed_deliveries}")
    click.echo(f"  Completed today:      {summary.completed_today}")
    click.echo(f"  Estimated earnings:   {summary.total_earnings}")
