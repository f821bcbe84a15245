"""CLI command for checkout."""

from __future__ import annotations

import click

from marketplace.application.checkout import CheckoutHandler
from marketplace.domain.exceptions import CheckoutError, DomainException
from marketplace.domain.model.order import PaymentMethod, ShippingAddress
from marketplace.infrastructure.bootstrap import Container
from marketplace.infrastructure.cli.order_commands import display_order


def _parse_product_ids(raw: str) -> list[str]:
    """Parse '1,3,7' into a list of product IDs."""
    ids = [part.strip() for part in raw.split(",") if part.strip()]
    if not ids:
        raise click.BadParameter("Expected at least one product ID, e.g. '1,3'.")
    return ids


@click.command("checkout")
@click.option("--buyer", required=True, help="Buyer ID.")
@click.option("--items", required=True, help="Product IDs to check out, e.g. '1,3'.")
@click.option(
    "--payment-method",
    required=True,
    type=click.Choice([m.value for m in PaymentMethod]),
    help="How the buyer pays.",
)
@click.option("--street", required=True)
@click.option("--city", required=True)
@click.option("--state", required=True)
@click.option("--zip", "zip_code", required=True)
@click.option("--country", default="US", show_default=True)
@click.option("--first-name", default="Customer")
@click.option("--last-name", default="Name")
@click.option("--phone", default="")
@click.pass_obj
def checkout(
    container: Container,
    buyer: str,
    items: str,
    payment_method: str,
    street: str,
    city: str,
    state: str,
    zip_code: str,
    country: str,
    first_name: str,
    last_name: str,
    phone: str,
) -> None:
    """Check out selected cart lines: reserve stock, charge, place the order."""
    product_ids = _parse_product_ids(items)

    handler = CheckoutHandler(
        cart_repo=container.cart_repository,
        product_repo=container.product_repository,
        order_repo=container.order_repository,
        ledger=container.inventory_ledger,
        pricing_resolver=container.pricing_resolver,
        payment_gateway=container.payment_gateway,
        pricing_policy=container.pricing_policy,
    )

    try:
        address = ShippingAddress(
            street=street,
            city=city,
            state=state,
            zip_code=zip_code,
            country=country,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
        )
        dto = handler.handle(
            buyer_id=buyer,
            selected_product_ids=product_ids,
            payment_method=payment_method,
            shipping_address=address,
        )
    except CheckoutError as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} placed.")
    display_order(dto)
