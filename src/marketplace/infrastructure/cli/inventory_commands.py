"""CLI commands for inventory management."""

from __future__ import annotations

import click

from marketplace.application.set_inventory import SetInventoryHandler
from marketplace.application.show_inventory import ShowInventoryHandler
from marketplace.domain.exceptions import DomainException
from marketplace.infrastructure.bootstrap import Container


@click.command("set")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units on hand.")
@click.pass_obj
def inventory_set(container: Container, product_id: str, quantity: int) -> None:
    """Set inventory level for a product."""
    handler = SetInventoryHandler(
        ledger=container.inventory_ledger,
        product_repo=container.product_repository,
    )

    try:
        handler.handle(product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Inventory for product #{product_id} set to {quantity}")


@click.command("show")
@click.pass_obj
def inventory_show(container: Container) -> None:
    """Show current inventory levels."""
    handler = ShowInventoryHandler(
        ledger=container.inventory_ledger,
        product_repo=container.product_repository,
    )
    lines = handler.handle()

    if not lines:
        click.echo("No inventory records found.")
        return

    click.echo(f"{'ID':<6} {'Product':<20} {'On hand':>8} {'Status':>14}")
    click.echo("-" * 51)
    for line in lines:
        click.echo(
            f"{line.product_id:<6} {line.product_name:<20} {line.on_hand:>8} {line.status:>14}"
        )
