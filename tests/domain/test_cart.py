"""Unit tests for the Cart aggregate."""

import pytest

from marketplace.domain.exceptions import EntityNotFoundError, ValidationError
from marketplace.domain.model.cart import Cart
from marketplace.domain.model.value_objects import Money


class TestAddItem:

    def test_add_new_line(self):
        cart = Cart.empty("buyer-1")
        line = cart.add_item("A", 2)
        assert line.quantity.value == 2
        assert cart.item_count == 2

    def test_adding_same_product_merges(self):
        cart = Cart.empty("buyer-1")
        cart.add_item("A", 2)
        cart.add_item("A", 3)
        assert len(cart.lines) == 1
        assert cart.find_line("A").quantity.value == 5

    def test_zero_quantity_rejected(self):
        cart = Cart.empty("buyer-1")
        with pytest.raises(ValidationError):
            cart.add_item("A", 0)

    def test_blank_buyer_rejected(self):
        with pytest.raises(ValidationError, match="Buyer ID is required"):
            Cart.empty("  ")


class TestUpdateAndRemove:

    def test_update_quantity(self):
        cart = Cart.empty("buyer-1")
        cart.add_item("A", 2)
        cart.update_quantity("A", 7)
        assert cart.find_line("A").quantity.value == 7

    def test_update_to_zero_removes_line(self):
        cart = Cart.empty("buyer-1")
        cart.add_item("A", 2)
        cart.update_quantity("A", 0)
        assert cart.is_empty

    def test_update_negative_rejected(self):
        cart = Cart.empty("buyer-1")
        cart.add_item("A", 2)
        with pytest.raises(ValidationError, match="cannot be negative"):
            cart.update_quantity("A", -1)

    def test_remove_missing_product(self):
        cart = Cart.empty("buyer-1")
        with pytest.raises(EntityNotFoundError, match="not in the cart"):
            cart.remove_item("A")

    def test_deduct_drops_lines_that_reach_zero(self):
        cart = Cart.empty("buyer-1")
        cart.add_item("A", 1)
        cart.add_item("B", 1)
        cart.deduct({"A": 1, "Z": 4})
        assert cart.product_ids == {"B"}

    def test_deduct_keeps_units_beyond_the_ordered_amount(self):
        cart = Cart.empty("buyer-1")
        cart.add_item("A", 5)
        cart.deduct({"A": 2})
        assert cart.find_line("A").quantity.value == 3

    def test_lines_for_selection(self):
        cart = Cart.empty("buyer-1")
        cart.add_item("A", 1)
        cart.add_item("B", 1)
        assert [l.product_id for l in cart.lines_for({"B", "C"})] == ["B"]


class TestSaveForLater:

    def test_save_for_later_moves_out_of_lines(self):
        cart = Cart.empty("buyer-1")
        cart.add_item("A", 3)
        cart.save_for_later("A")
        assert cart.is_empty
        assert cart.saved_for_later == {"A"}

    def test_move_to_cart_adds_single_unit(self):
        cart = Cart.empty("buyer-1")
        cart.add_item("A", 3)
        cart.save_for_later("A")
        cart.move_to_cart("A")
        assert cart.find_line("A").quantity.value == 1
        assert cart.saved_for_later == set()

    def test_move_unsaved_product_rejected(self):
        cart = Cart.empty("buyer-1")
        with pytest.raises(EntityNotFoundError, match="not saved for later"):
            cart.move_to_cart("A")


class TestCoupons:

    def test_apply_coupon_uppercases_code(self):
        cart = Cart.empty("buyer-1")
        cart.apply_coupon("save5", Money.of("5.00"))
        assert cart.applied_coupons[0].code == "SAVE5"

    def test_duplicate_coupon_rejected(self):
        cart = Cart.empty("buyer-1")
        cart.apply_coupon("SAVE5", Money.of("5.00"))
        with pytest.raises(ValidationError, match="already applied"):
            cart.apply_coupon("save5", Money.of("5.00"))

    def test_coupon_discount_sums(self):
        cart = Cart.empty("buyer-1")
        cart.apply_coupon("A", Money.of("5.00"))
        cart.apply_coupon("B", Money.of("2.50"))
        assert cart.coupon_discount == Money.of("7.50")

    def test_consume_coupons_empties_list(self):
        cart = Cart.empty("buyer-1")
        cart.apply_coupon("A", Money.of("5.00"))
        used = cart.consume_coupons()
        assert [c.code for c in used] == ["A"]
        assert cart.coupon_discount == Money.zero()

    def test_clear_drops_lines_and_coupons(self):
        cart = Cart.empty("buyer-1")
        cart.add_item("A", 1)
        cart.apply_coupon("A", Money.of("5.00"))
        cart.clear()
        assert cart.is_empty
        assert cart.applied_coupons == []
