import logging

import click

from marketplace.infrastructure.bootstrap import Container
from marketplace.infrastructure.cli.cart_commands import (
    cart_add,
    cart_apply_coupon,
    cart_move_to_cart,
    cart_remove,
    cart_save_for_later,
    cart_show,
    cart_update,
)
from marketplace.infrastructure.cli.checkout_commands import checkout
from marketplace.infrastructure.cli.inventory_commands import inventory_set, inventory_show
from marketplace.infrastructure.cli.order_commands import (
    order_advance,
    order_cancel,
    order_list,
    order_return,
    order_show,
)
from marketplace.infrastructure.cli.product_commands import (
    product_add,
    product_discount,
    product_list,
    product_update,
)
from marketplace.infrastructure.config import Settings


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Marketplace — carts, checkout and orders"""
    if ctx.obj is None:
        try:
            ctx.obj = Container(Settings())
        except ValueError as exc:
            raise click.ClickException(f"Invalid configuration: {exc}")
    logging.basicConfig(
        level=ctx.obj.settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def product() -> None:
    """Manage the catalog."""


@cli.group()
def inventory() -> None:
    """Manage stock levels."""


@cli.group()
def cart() -> None:
    """Manage a buyer's cart."""


@cli.group()
def order() -> None:
    """Inspect and move orders through their lifecycle."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_update)
product.add_command(product_discount)
inventory.add_command(inventory_set)
inventory.add_command(inventory_show)
cart.add_command(cart_add)
cart.add_command(cart_update)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_save_for_later)
cart.add_command(cart_move_to_cart)
cart.add_command(cart_apply_coupon)
cli.add_command(checkout)
order.add_command(order_show)
order.add_command(order_list)
order.add_command(order_advance)
order.add_command(order_cancel)
order.add_command(order_return)
