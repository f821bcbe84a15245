"""Unit tests for the pricing policy, product sales and the price resolver."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from marketplace.domain.exceptions import ProductNotFound, ValidationError
from marketplace.domain.model.pricing import PricingPolicy
from marketplace.domain.model.product import Discount, Product
from marketplace.domain.model.value_objects import Money
from marketplace.domain.service.pricing_resolver import PricingResolver
from tests.fakes import FakeProductRepository

NOW = datetime(2024, 6, 1, 9, 30, tzinfo=timezone.utc)


class TestPricingPolicy:

    def test_small_basket_pays_tax_and_shipping(self):
        quote = PricingPolicy().quote(Money.of("30.00"))
        assert quote.subtotal == Money.of("30.00")
        assert quote.tax == Money.of("2.55")
        assert quote.shipping == Money.of("10.00")
        assert quote.discount == Money.zero()
        assert quote.total == Money.of("42.55")

    def test_free_shipping_at_threshold(self):
        quote = PricingPolicy().quote(Money.of("50.00"))
        assert quote.shipping == Money.zero()
        assert quote.total == Money.of("54.25")

    def test_discount_subtracted(self):
        quote = PricingPolicy().quote(Money.of("30.00"), Money.of("5.00"))
        assert quote.total == Money.of("37.55")

    def test_discount_capped_at_gross(self):
        quote = PricingPolicy().quote(Money.of("10.00"), Money.of("500.00"))
        assert quote.discount == Money.of("20.85")
        assert quote.total == Money.zero()

    def test_custom_policy(self):
        policy = PricingPolicy(
            tax_rate=Decimal("0"),
            shipping_fee=Money.of("4.99"),
            free_shipping_threshold=Money.of("100"),
        )
        assert policy.quote(Money.of("20")).total == Money.of("24.99")

    def test_tax_rate_out_of_range(self):
        with pytest.raises(ValidationError, match="Tax rate"):
            PricingPolicy(tax_rate=Decimal("1.5"))


class TestProductSale:

    def test_no_discount_means_list_price(self):
        product = Product(id="1", seller_id="s", name="Widget", price=Money.of("20.00"))
        assert product.price_at(NOW) == Money.of("20.00")

    def test_active_discount(self):
        product = Product(id="1", seller_id="s", name="Widget", price=Money.of("20.00"))
        product.start_sale(Discount(percentage=Decimal("25")))
        assert product.price_at(NOW) == Money.of("15.00")

    def test_discount_outside_window_ignored(self):
        product = Product(id="1", seller_id="s", name="Widget", price=Money.of("20.00"))
        product.start_sale(
            Discount(
                percentage=Decimal("50"),
                valid_from=NOW + timedelta(days=1),
                valid_to=NOW + timedelta(days=2),
            )
        )
        assert product.price_at(NOW) == Money.of("20.00")
        assert product.price_at(NOW + timedelta(days=1, hours=1)) == Money.of("10.00")
        assert product.price_at(NOW + timedelta(days=3)) == Money.of("20.00")

    def test_discount_rounds_to_cents(self):
        product = Product(id="1", seller_id="s", name="Widget", price=Money.of("9.99"))
        product.start_sale(Discount(percentage=Decimal("15")))
        assert product.price_at(NOW) == Money.of("8.49")

    def test_percentage_out_of_range(self):
        with pytest.raises(ValidationError, match="between 0 and 100"):
            Discount(percentage=Decimal("101"))

    def test_backwards_window_rejected(self):
        with pytest.raises(ValidationError, match="ends before it starts"):
            Discount(percentage=Decimal("10"), valid_from=NOW, valid_to=NOW - timedelta(hours=1))

    def test_update_price_must_be_positive(self):
        product = Product(id="1", seller_id="s", name="Widget", price=Money.of("20.00"))
        with pytest.raises(ValidationError, match="greater than zero"):
            product.update_price(Money.zero())


class TestPricingResolver:

    def test_resolves_live_price(self):
        product = Product(id="1", seller_id="s", name="Widget", price=Money.of("20.00"))
        repo = FakeProductRepository([product])
        resolver = PricingResolver(repo, clock=lambda: NOW)

        assert resolver.current_price("1") == Money.of("20.00")
        product.update_price(Money.of("18.00"))
        assert resolver.current_price("1") == Money.of("18.00")

    def test_applies_sale_at_clock_time(self):
        product = Product(
            id="1",
            seller_id="s",
            name="Widget",
            price=Money.of("20.00"),
            discount=Discount(percentage=Decimal("10"), valid_to=NOW),
        )
        resolver = PricingResolver(FakeProductRepository([product]), clock=lambda: NOW)
        assert resolver.current_price("1") == Money.of("18.00")

    def test_unknown_product(self):
        resolver = PricingResolver(FakeProductRepository())
        with pytest.raises(ProductNotFound, match="'404'"):
            resolver.current_price("404")
