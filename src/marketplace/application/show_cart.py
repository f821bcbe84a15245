"""Application service: Show Cart use case (query).

Prices every line at the live catalog price and runs the same pricing
policy checkout uses. The result is a preview; checkout prices again.
Lines whose product has left the catalog are left out of the preview.
"""

from __future__ import annotations

from marketplace.application.dto import CartDTO, CartLineDTO
from marketplace.domain.model.pricing import PricingPolicy
from marketplace.domain.model.value_objects import Money
from marketplace.domain.repository.cart_repository import CartRepository
from marketplace.domain.repository.product_repository import ProductRepository
from marketplace.domain.service.pricing_resolver import PricingResolver


class ShowCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        pricing_resolver: PricingResolver,
        pricing_policy: PricingPolicy | None = None,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._pricing_resolver = pricing_resolver
        self._pricing_policy = pricing_policy or PricingPolicy()

    def handle(self, buyer_id: str) -> CartDTO:
        cart = self._cart_repo.get_or_create(buyer_id)

        lines: list[CartLineDTO] = []
        subtotal = Money.zero()
        for line in cart.lines:
            product = self._product_repo.get_by_id(line.product_id)
            if product is None:
                continue
            unit_price = self._pricing_resolver.current_price(line.product_id)
            line_total = unit_price * line.quantity.value
            subtotal = subtotal + line_total
            lines.append(
                CartLineDTO(
                    product_id=line.product_id,
                    product_name=product.name,
                    quantity=line.quantity.value,
                    unit_price=str(unit_price),
                    line_total=str(line_total),
                )
            )

        quote = self._pricing_policy.quote(subtotal, cart.coupon_discount)
        return CartDTO(
            buyer_id=cart.buyer_id,
            lines=lines,
            saved_for_later=sorted(cart.saved_for_later),
            coupons=[c.code for c in cart.applied_coupons],
            item_count=sum(l.quantity for l in lines),
            subtotal=str(quote.subtotal),
            tax=str(quote.tax),
            shipping=str(quote.shipping),
            discount=str(quote.discount),
            total=str(quote.total),
        )
