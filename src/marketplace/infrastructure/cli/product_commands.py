"""CLI commands for the Product aggregate."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from marketplace.application.add_product import AddProductHandler
from marketplace.application.set_discount import SetDiscountHandler
from marketplace.application.update_product import UpdateProductHandler
from marketplace.domain.exceptions import DomainException
from marketplace.infrastructure.bootstrap import Container


@click.command("add")
@click.option("--seller", required=True, help="Seller ID.")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--description", default="", help="Product description.")
@click.option("--image", default="", help="Image URL.")
@click.pass_obj
def product_add(
    container: Container, seller: str, name: str, price: str, description: str, image: str
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=container.product_repository)

    try:
        product = handler.handle(
            seller_id=seller, name=name, price=price, description=description, image=image
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")


@click.command("list")
@click.pass_obj
def product_list(container: Container) -> None:
    """List all products in the catalog."""
    products = container.product_repository.list_all()

    if not products:
        click.echo("No products found.")
        return

    resolver = container.pricing_resolver
    click.echo(f"{'ID':<6} {'Name':<20} {'Seller':<10} {'List':>10} {'Now':>10}")
    click.echo("-" * 60)
    for p in products:
        click.echo(
            f"{p.id:<6} {p.name:<20} {p.seller_id:<10} "
            f"{str(p.price):>10} {str(resolver.current_price(p.id)):>10}"
        )


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", required=True, help="New price (e.g. 29.99).")
@click.pass_obj
def product_update(container: Container, product_id: str, price: str) -> None:
    """Update a product's price."""
    handler = UpdateProductHandler(product_repo=container.product_repository)

    try:
        handler.handle(product_id=product_id, new_price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} price updated to ${price}")


@click.command("discount")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--percentage", required=True, help="Percent off (0 ends the sale).")
@click.option("--from", "valid_from", type=click.DateTime(), default=None, help="Sale start.")
@click.option("--to", "valid_to", type=click.DateTime(), default=None, help="Sale end.")
@click.pass_obj
def product_discount(
    container: Container,
    product_id: str,
    percentage: str,
    valid_from: datetime | None,
    valid_to: datetime | None,
) -> None:
    """Start or end a percentage sale on a product."""
    handler = SetDiscountHandler(product_repo=container.product_repository)

    try:
        handler.handle(
            product_id=product_id,
            percentage=percentage,
            valid_from=_as_utc(valid_from),
            valid_to=_as_utc(valid_to),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} discount set to {percentage}%")


def _as_utc(value: datetime | None) -> datetime | None:
    return value.replace(tzinfo=timezone.utc) if value is not None else None
