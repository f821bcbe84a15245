"""Application service: Checkout use case.

Turns a buyer-selected subset of cart lines into a paid, confirmed order.

Steps, each run inside one saga so any failure undoes what came before:
1. Intersect the selection with the cart (nothing left -> EmptySelection).
2. Per line, in ascending product id order: re-price from the catalog,
   then reserve stock.                         undo: release stock
3. Price the basket with the pricing policy.
4. Charge the gateway for the total.           undo: refund
5. Snapshot product facts and persist the order. undo: discard order
6. Take the checked-out units off the cart.

Either every effect happens (order + decremented stock + pruned cart) or
none does. Nothing is retried automatically.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

from marketplace.application.dto import OrderDTO, to_order_dto
from marketplace.domain.exceptions import (
    CheckoutError,
    EmptySelection,
    InvariantViolation,
    PaymentFailed,
    PaymentGatewayError,
    ProductNotFound,
    UnknownPaymentMethod,
)
from marketplace.domain.model.cart import Cart, CartLine
from marketplace.domain.model.order import (
    Order,
    OrderLineSnapshot,
    PaymentMethod,
    ShippingAddress,
    generate_order_number,
)
from marketplace.domain.model.pricing import PriceBreakdown, PricingPolicy
from marketplace.domain.model.value_objects import Money
from marketplace.domain.repository.cart_repository import CartRepository
from marketplace.domain.repository.order_repository import OrderRepository
from marketplace.domain.repository.product_repository import ProductRepository
from marketplace.domain.service.inventory_ledger import InventoryLedger, Reservation
from marketplace.domain.service.payment_gateway import PaymentGateway
from marketplace.domain.service.pricing_resolver import PricingResolver, utc_now
from marketplace.domain.service.saga import Saga

logger = logging.getLogger(__name__)

MAX_ORDER_NUMBER_ATTEMPTS = 5


@dataclass(frozen=True)
class _ReservedLine:
    line: CartLine
    unit_price: Money
    reservation: Reservation


class CheckoutHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        pricing_resolver: PricingResolver,
        payment_gateway: PaymentGateway,
        pricing_policy: PricingPolicy | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._order_repo = order_repo
        self._ledger = ledger
        self._pricing_resolver = pricing_resolver
        self._payment_gateway = payment_gateway
        self._pricing_policy = pricing_policy or PricingPolicy()
        self._clock = clock

    def handle(
        self,
        buyer_id: str,
        selected_product_ids: Iterable[str],
        payment_method: str | PaymentMethod,
        shipping_address: ShippingAddress,
    ) -> OrderDTO:
        """Check out the selected cart lines for *buyer_id*.

        Raises a CheckoutError subclass on any expected failure, after
        compensating. The buyer's cart is untouched and no money moved.
        """
        method = self._parse_payment_method(payment_method)
        selected = set(selected_product_ids)
        if not selected:
            raise EmptySelection()

        cart = self._cart_repo.get_for_buyer(buyer_id)
        lines = sorted(cart.lines_for(selected), key=lambda l: l.product_id) if cart else []
        if not lines:
            raise EmptySelection("None of the selected products are in the cart")

        logger.info(
            "Checkout started for buyer %s: %d line(s) via %s",
            buyer_id, len(lines), method.value,
        )

        try:
            with Saga(f"checkout:{buyer_id}") as saga:
                reserved = self._reserve_lines(saga, lines)
                pricing = self._quote(reserved, cart.coupon_discount)
                transaction_id = saga.step(
                    "charge payment",
                    lambda: self._charge(method, pricing.total),
                    compensation=lambda tid: self._payment_gateway.refund(tid, pricing.total),
                )
                order = self._build_order(buyer_id, reserved, pricing, method, transaction_id, shipping_address)
                saga.step(
                    f"persist order {order.order_number}",
                    lambda: self._order_repo.save(order),
                    compensation=lambda _: self._order_repo.discard(order.order_number),
                )
                saga.step(
                    "prune cart",
                    lambda: self._prune_cart(
                        buyer_id,
                        {r.reservation.product_id: r.reservation.quantity for r in reserved},
                    ),
                )
        except CheckoutError as exc:
            logger.warning("Checkout failed for buyer %s: %s (%s)", buyer_id, exc.kind, exc)
            raise

        logger.info(
            "Checkout completed for buyer %s: order %s, total %s",
            buyer_id, order.order_number, order.pricing.total,
        )
        return to_order_dto(order)

    # --- Steps ----------------------------------------------------------------

    def _reserve_lines(self, saga: Saga, lines: list[CartLine]) -> list[_ReservedLine]:
        reserved: list[_ReservedLine] = []
        for line in lines:
            unit_price = self._pricing_resolver.current_price(line.product_id)
            reservation = saga.step(
                f"reserve {line.quantity.value} x {line.product_id}",
                lambda: self._ledger.reserve(line.product_id, line.quantity.value),
                compensation=self._ledger.release_reservation,
            )
            reserved.append(_ReservedLine(line=line, unit_price=unit_price, reservation=reservation))
        return reserved

    def _quote(self, reserved: list[_ReservedLine], discount: Money) -> PriceBreakdown:
        subtotal = Money.zero()
        for item in reserved:
            subtotal = subtotal + item.unit_price * item.line.quantity.value
        return self._pricing_policy.quote(subtotal, discount)

    def _charge(self, method: PaymentMethod, amount: Money) -> str:
        try:
            result = self._payment_gateway.charge(method, amount)
        except PaymentGatewayError as exc:
            logger.error("Payment gateway error: %s", exc)
            raise PaymentFailed("payment provider unavailable") from exc

        if not result.success:
            raise PaymentFailed(result.error or "payment declined")
        if not result.transaction_id:
            raise InvariantViolation("Gateway approved a charge without a transaction ID")
        return result.transaction_id

    def _build_order(
        self,
        buyer_id: str,
        reserved: list[_ReservedLine],
        pricing: PriceBreakdown,
        method: PaymentMethod,
        transaction_id: str,
        shipping_address: ShippingAddress,
    ) -> Order:
        snapshots = [self._snapshot(item) for item in reserved]
        order = Order.place(
            order_number=self._new_order_number(),
            buyer_id=buyer_id,
            lines=snapshots,
            pricing=pricing,
            payment_method=method,
            transaction_id=transaction_id,
            shipping_address=shipping_address,
            now=self._clock(),
        )

        held = {r.reservation.product_id: r.reservation.quantity for r in reserved}
        if order.quantities_by_product() != held:
            raise InvariantViolation(
                f"Order quantities {order.quantities_by_product()} "
                f"do not match reserved stock {held}"
            )
        return order

    def _snapshot(self, item: _ReservedLine) -> OrderLineSnapshot:
        product = self._product_repo.get_by_id(item.line.product_id)
        if product is None:
            raise ProductNotFound(item.line.product_id)
        return OrderLineSnapshot(
            product_id=product.id,
            seller_id=product.seller_id,
            quantity=item.line.quantity,
            unit_price_at_purchase=item.unit_price,
            name_at_purchase=product.name,
            description_at_purchase=product.description,
            image_at_purchase=product.image,
        )

    def _prune_cart(self, buyer_id: str, ordered: dict[str, int]) -> None:
        # Re-read so lines and units the buyer added during checkout survive.
        cart: Cart = self._cart_repo.get_or_create(buyer_id)
        cart.deduct(ordered)
        cart.consume_coupons()
        self._cart_repo.save(cart)

    # --- Helpers --------------------------------------------------------------

    def _new_order_number(self) -> str:
        for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
            number = generate_order_number(self._clock())
            if not self._order_repo.exists(number):
                return number
        raise InvariantViolation("Could not generate a unique order number")

    @staticmethod
    def _parse_payment_method(value: str | PaymentMethod) -> PaymentMethod:
        if isinstance(value, PaymentMethod):
            return value
        try:
            return PaymentMethod((value or "").strip().lower())
        except ValueError:
            raise UnknownPaymentMethod(str(value))
