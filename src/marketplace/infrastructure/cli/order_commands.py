"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from marketplace.application.advance_order import AdvanceOrderHandler
from marketplace.application.cancel_order import CancelOrderHandler
from marketplace.application.dto import OrderDTO
from marketplace.application.list_orders import ListOrdersHandler
from marketplace.application.return_order import ReturnOrderHandler
from marketplace.application.show_order import ShowOrderHandler
from marketplace.domain.exceptions import DomainException
from marketplace.infrastructure.bootstrap import Container


def display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number}  (status={dto.status})")
    click.echo(f"Buyer:   {dto.buyer_id}")
    click.echo(f"Created: {dto.created_at}")
    click.echo(f"Payment: {dto.payment_method} ({dto.payment_status})")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*47}")
    for label, value in (
        ("Subtotal", dto.subtotal),
        ("Tax", dto.tax),
        ("Shipping", dto.shipping),
        ("Discount", dto.discount),
        ("Order Total", dto.total),
    ):
        click.echo(f"  {label:<27} {value:>20}")
    click.echo()
    for entry in dto.timeline:
        note = f"  {entry.note}" if entry.note else ""
        click.echo(f"  {entry.timestamp}  {entry.status:<10}{note}")


@click.command("show")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.pass_obj
def order_show(container: Container, order_number: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=container.order_repository)

    try:
        dto = handler.handle(order_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_order(dto)


@click.command("list")
@click.option("--buyer", required=True, help="Buyer ID.")
@click.pass_obj
def order_list(container: Container, buyer: str) -> None:
    """List a buyer's orders, newest first."""
    dtos = ListOrdersHandler(order_repo=container.order_repository).handle(buyer)

    if not dtos:
        click.echo("No orders found.")
        return

    click.echo(f"{'Order':<24} {'Status':<11} {'Total':>10} {'Created':>22}")
    click.echo("-" * 70)
    for dto in dtos:
        click.echo(f"{dto.order_number:<24} {dto.status:<11} {dto.total:>10} {dto.created_at:>22}")


@click.command("advance")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option(
    "--status",
    required=True,
    type=click.Choice(["processing", "shipped", "delivered"]),
    help="Next fulfilment status.",
)
@click.option("--note", default="", help="Timeline note.")
@click.pass_obj
def order_advance(container: Container, order_number: str, status: str, note: str) -> None:
    """Move an order forward through fulfilment."""
    handler = AdvanceOrderHandler(
        order_repo=container.order_repository, order_locks=container.order_locks
    )

    try:
        handler.handle(order_number, status, note)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_number} is now {status}.")


@click.command("cancel")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option("--reason", default="Cancelled by buyer", help="Why the order is cancelled.")
@click.pass_obj
def order_cancel(container: Container, order_number: str, reason: str) -> None:
    """Cancel an order (refunds payment, restores stock)."""
    handler = CancelOrderHandler(
        order_repo=container.order_repository,
        ledger=container.inventory_ledger,
        payment_gateway=container.payment_gateway,
        order_locks=container.order_locks,
    )

    try:
        handler.handle(order_number, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_number} cancelled.")


@click.command("return")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option("--note", default="Returned by buyer", help="Timeline note.")
@click.pass_obj
def order_return(container: Container, order_number: str, note: str) -> None:
    """Return a delivered order (refunds payment)."""
    handler = ReturnOrderHandler(
        order_repo=container.order_repository,
        payment_gateway=container.payment_gateway,
        order_locks=container.order_locks,
    )

    try:
        handler.handle(order_number, note)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_number} returned.")
