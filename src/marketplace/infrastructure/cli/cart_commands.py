"""CLI commands for the Cart aggregate."""

from __future__ import annotations

import click

from marketplace.application.add_to_cart import AddToCartHandler
from marketplace.application.apply_coupon import ApplyCouponHandler
from marketplace.application.remove_from_cart import RemoveFromCartHandler
from marketplace.application.save_for_later import MoveToCartHandler, SaveForLaterHandler
from marketplace.application.show_cart import ShowCartHandler
from marketplace.application.update_cart_item import UpdateCartItemHandler
from marketplace.domain.exceptions import DomainException
from marketplace.infrastructure.bootstrap import Container

buyer_option = click.option("--buyer", required=True, help="Buyer ID.")
product_option = click.option("--product", "product_id", required=True, help="Product ID.")


@click.command("add")
@buyer_option
@product_option
@click.option("--quantity", default=1, show_default=True, type=int, help="Units to add.")
@click.pass_obj
def cart_add(container: Container, buyer: str, product_id: str, quantity: int) -> None:
    """Add a product to a buyer's cart."""
    handler = AddToCartHandler(
        cart_repo=container.cart_repository,
        product_repo=container.product_repository,
        ledger=container.inventory_ledger,
    )

    try:
        total = handler.handle(buyer_id=buyer, product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} in cart: {total} unit(s)")


@click.command("update")
@buyer_option
@product_option
@click.option("--quantity", required=True, type=int, help="New quantity (0 removes).")
@click.pass_obj
def cart_update(container: Container, buyer: str, product_id: str, quantity: int) -> None:
    """Change the quantity of a cart line."""
    handler = UpdateCartItemHandler(
        cart_repo=container.cart_repository, ledger=container.inventory_ledger
    )

    try:
        handler.handle(buyer_id=buyer, product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} quantity set to {quantity}")


@click.command("remove")
@buyer_option
@product_option
@click.pass_obj
def cart_remove(container: Container, buyer: str, product_id: str) -> None:
    """Remove a product from the cart."""
    handler = RemoveFromCartHandler(cart_repo=container.cart_repository)

    try:
        handler.handle(buyer_id=buyer, product_id=product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} removed from cart")


@click.command("save-for-later")
@buyer_option
@product_option
@click.pass_obj
def cart_save_for_later(container: Container, buyer: str, product_id: str) -> None:
    """Move a cart line to the saved-for-later list."""
    handler = SaveForLaterHandler(cart_repo=container.cart_repository)

    try:
        handler.handle(buyer_id=buyer, product_id=product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} saved for later")


@click.command("move-to-cart")
@buyer_option
@product_option
@click.pass_obj
def cart_move_to_cart(container: Container, buyer: str, product_id: str) -> None:
    """Move a saved product back into the cart."""
    handler = MoveToCartHandler(cart_repo=container.cart_repository)

    try:
        handler.handle(buyer_id=buyer, product_id=product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} moved back to cart")


@click.command("apply-coupon")
@buyer_option
@click.option("--code", required=True, help="Coupon code.")
@click.option("--discount", required=True, help="Discount amount (e.g. 5.00).")
@click.pass_obj
def cart_apply_coupon(container: Container, buyer: str, code: str, discount: str) -> None:
    """Apply a coupon to the cart."""
    handler = ApplyCouponHandler(cart_repo=container.cart_repository)

    try:
        handler.handle(buyer_id=buyer, code=code, discount=discount)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Coupon {code.upper()} applied")


@click.command("show")
@buyer_option
@click.pass_obj
def cart_show(container: Container, buyer: str) -> None:
    """Show a buyer's cart with live prices."""
    handler = ShowCartHandler(
        cart_repo=container.cart_repository,
        product_repo=container.product_repository,
        pricing_resolver=container.pricing_resolver,
        pricing_policy=container.pricing_policy,
    )
    dto = handler.handle(buyer)

    if not dto.lines:
        click.echo("Cart is empty.")
    else:
        click.echo(f"  {'ID':<6} {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
        click.echo(f"  {'-'*54}")
        for line in dto.lines:
            click.echo(
                f"  {line.product_id:<6} {line.product_name:<20} {line.quantity:>5} "
                f"{line.unit_price:>10} {line.line_total:>10}"
            )
        click.echo(f"  {'-'*54}")
        for label, value in (
            ("Subtotal", dto.subtotal),
            ("Tax", dto.tax),
            ("Shipping", dto.shipping),
            ("Discount", dto.discount),
            ("Estimated total", dto.total),
        ):
            click.echo(f"  {label:<27} {value:>27}")

    if dto.coupons:
        click.echo(f"Coupons: {', '.join(dto.coupons)}")
    if dto.saved_for_later:
        click.echo(f"Saved for later: {', '.join(dto.saved_for_later)}")
