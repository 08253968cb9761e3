"""
Unit tests for the Cart Engine

Line pricing, active-line bookkeeping and keypad entry.
"""
import pytest
from decimal import Decimal

from quicksell.core.exceptions import ValidationError
from quicksell.domain.sale import CartItem
from quicksell.services.cart_engine import (
    Cart,
    cart_total,
    line_discount_value,
    line_profit,
    line_total,
    parse_number,
)


class TestLinePricing:
    """Test the pure line pricing functions"""

    def test_discounted_line_figures(self, product_factory):
        """sellingPrice 100, costPrice 60, quantity 2, discount 10%"""
        line = CartItem.from_product(product_factory(price=100, cost=60))
        line.quantity = 2
        line.discount = Decimal('10')

        assert line_total(line) == Decimal('180')
        assert line_profit(line) == Decimal('60')
        assert line_discount_value(line) == Decimal('20')

    def test_undiscounted_line(self, product_factory):
        line = CartItem.from_product(product_factory(price=350, cost=120))
        line.quantity = 3

        assert line_total(line) == Decimal('1050')
        assert line_profit(line) == Decimal('690')
        assert line_discount_value(line) == 0

    def test_full_discount_sells_at_a_loss(self, product_factory):
        line = CartItem.from_product(product_factory(price=100, cost=60))
        line.discount = Decimal('100')

        assert line_total(line) == 0
        assert line_profit(line) == Decimal('-60')
        assert line_discount_value(line) == Decimal('100')

    def test_empty_cart_total_is_zero(self):
        assert cart_total([]) == 0
        assert Cart().total() == 0


class TestAddLine:
    """Test Cart.add_line"""

    def test_cart_total_matches_sum_of_line_totals(self, sample_products):
        cart = Cart()
        for product in sample_products:
            cart.add_line(product)
        cart.select_line(0)
        cart.set_active_field("discount", "15")
        cart.select_line(1)
        cart.set_active_field("quantity", "4")

        expected = sum(float(line_total(line)) for line in cart.lines)
        assert abs(float(cart.total()) - expected) < 1e-6

    def test_new_product_appends_line_and_activates_it(self, product_factory):
        cart = Cart()
        cart.add_line(product_factory("P-1"))
        line = cart.add_line(product_factory("P-2"))

        assert len(cart) == 2
        assert cart.active_index == 1
        assert line.quantity == 1
        assert line.discount == 0

    def test_same_product_twice_increments_quantity(self, product_factory):
        cart = Cart()
        cart.add_line(product_factory("P-1"))
        cart.add_line(product_factory("P-2"))
        cart.add_line(product_factory("P-1"))

        assert len(cart) == 2
        assert cart.lines[0].quantity == 2
        assert cart.active_index == 0

    def test_out_of_stock_product_is_ignored(self, product_factory):
        cart = Cart()
        result = cart.add_line(product_factory("P-1", stock=0))

        assert result is None
        assert cart.is_empty
        assert cart.active_index is None

    def test_line_is_a_snapshot_of_the_product(self, product_factory):
        product = product_factory("P-1", price=100)
        cart = Cart()
        cart.add_line(product)

        product.selling_price = Decimal('999')

        assert cart.lines[0].selling_price == Decimal('100')

    def test_quantity_may_exceed_stock_after_add(self, product_factory):
        """The cart does not re-check stock once a product is in it"""
        product = product_factory("P-1", stock=1)
        cart = Cart()
        cart.add_line(product)
        cart.add_line(product)
        cart.set_active_field("quantity", "5")

        assert cart.lines[0].quantity == 5


class TestRemoveLine:
    """Test Cart.remove_line active-index tracking"""

    def _cart_with(self, product_factory, count):
        cart = Cart()
        for i in range(count):
            cart.add_line(product_factory(f"P-{i}"))
        return cart

    def test_removing_active_line_clears_selection(self, product_factory):
        cart = self._cart_with(product_factory, 3)
        cart.select_line(1)

        cart.remove_line(1)

        assert cart.active_index is None
        assert [line.id for line in cart.lines] == ["P-0", "P-2"]

    def test_removing_below_active_shifts_it_down(self, product_factory):
        cart = self._cart_with(product_factory, 3)
        cart.select_line(2)

        cart.remove_line(0)

        assert cart.active_index == 1
        assert cart.active_line.id == "P-2"

    def test_removing_above_active_keeps_it(self, product_factory):
        cart = self._cart_with(product_factory, 3)
        cart.select_line(0)

        cart.remove_line(2)

        assert cart.active_index == 0

    def test_invalid_index_raises(self, product_factory):
        cart = self._cart_with(product_factory, 1)
        with pytest.raises(IndexError):
            cart.remove_line(5)


class TestSetActiveField:
    """Test Cart.set_active_field parsing and clamping"""

    @pytest.fixture
    def cart(self, product_factory):
        cart = Cart()
        cart.add_line(product_factory("P-1", price=100))
        return cart

    @pytest.mark.parametrize("raw, expected", [
        ("3", 3),
        ("", 1),
        ("0", 1),
        ("abc", 1),
        ("-4", 0),
        ("2.7", 2),
        (12, 12),
    ])
    def test_quantity(self, cart, raw, expected):
        cart.set_active_field("quantity", raw)
        assert cart.active_line.quantity == expected

    @pytest.mark.parametrize("raw, expected", [
        ("15", Decimal('15')),
        ("250", Decimal('100')),
        ("-30", Decimal('0')),
        (1e9, Decimal('100')),
        (-1e9, Decimal('0')),
        ("", Decimal('0')),
    ])
    def test_discount_is_clamped(self, cart, raw, expected):
        cart.set_active_field("discount", raw)
        assert cart.active_line.discount == expected

    def test_price_override(self, cart):
        cart.set_active_field("price", "79.5")
        assert cart.active_line.selling_price == Decimal('79.5')
        assert cart.total() == Decimal('79.5')

    def test_no_active_line_is_a_noop(self, cart):
        cart.select_line(None)

        assert cart.set_active_field("quantity", "9") is None
        assert cart.lines[0].quantity == 1

    def test_unknown_field_rejected(self, cart):
        with pytest.raises(ValidationError):
            cart.set_active_field("colour", "red")


class TestKeypad:
    """Test keypad entry on the active line"""

    def test_digits_accumulate(self, product_factory):
        cart = Cart()
        cart.add_line(product_factory("P-1"))

        cart.press_key("1")
        cart.press_key("2")

        assert cart.active_line.quantity == 12
        assert cart.entry_buffer == "12"

    def test_clear_resets_quantity_to_one(self, product_factory):
        cart = Cart()
        cart.add_line(product_factory("P-1"))
        cart.press_key("7")

        cart.press_key("C")

        assert cart.active_line.quantity == 1
        assert cart.entry_buffer == ""

    def test_mode_change_and_add_reset_buffer(self, product_factory):
        cart = Cart()
        cart.add_line(product_factory("P-1"))
        cart.press_key("3")

        cart.set_entry_mode("discount")
        assert cart.entry_buffer == ""
        cart.press_key("5")
        assert cart.active_line.discount == Decimal('5')

        cart.add_line(product_factory("P-2"))
        assert cart.entry_buffer == ""


class TestParseNumber:
    """Test raw input parsing"""

    @pytest.mark.parametrize("raw, expected", [
        ("12", Decimal('12')),
        ("12.50", Decimal('12.50')),
        ("3.5.1", Decimal('3.5')),
        ("  7x", Decimal('7')),
        (".5", Decimal('0.5')),
        ("", Decimal('0')),
        (None, Decimal('0')),
        ("nan", Decimal('0')),
        (float('inf'), Decimal('0')),
    ])
    def test_parse(self, raw, expected):
        assert parse_number(raw) == expected


def test_clear_empties_cart(product_factory):
    cart = Cart()
    cart.add_line(product_factory("P-1"))
    cart.clear()

    assert cart.is_empty
    assert cart.active_index is None


class TestInputBounds:
    """Test that keypad and form input cannot produce invalid lines"""

    @pytest.fixture
    def cart(self, product_factory):
        cart = Cart()
        cart.add_line(product_factory("P-1", price=100))
        return cart

    @pytest.mark.parametrize("raw", ["-5", -5, "-0.01", -1e9])
    def test_negative_price_becomes_zero(self, cart, raw):
        cart.set_active_field("price", raw)

        assert cart.active_line.selling_price == 0
        assert cart.total() == 0

    @pytest.mark.parametrize("key", ["-", "+", "x", "12", "", "CC", None])
    def test_unknown_keypad_key_rejected(self, cart, key):
        cart.set_entry_mode("price")
        cart.press_key("4")

        with pytest.raises(ValidationError):
            cart.press_key(key)

        assert cart.entry_buffer == "4"
        assert cart.active_line.selling_price == Decimal('4')

    def test_keypad_decimal_point(self, cart):
        cart.set_entry_mode("price")
        for key in "12.5":
            cart.press_key(key)

        assert cart.active_line.selling_price == Decimal('12.5')

    @pytest.mark.parametrize("raw, expected", [
        ("1e5", Decimal('100000')),
        ("2.5E2", Decimal('250')),
        ("1e-2", Decimal('0.01')),
        ("12e", Decimal('12')),
        ("1e999999", Decimal('1e12')),
        ("-1e999999", Decimal('-1e12')),
        (10 ** 30, Decimal('1e12')),
    ])
    def test_parse_exponent_and_bounds(self, raw, expected):
        assert parse_number(raw) == expected

    def test_exponent_quantity(self, cart):
        cart.set_active_field("quantity", "1e3")

        assert cart.active_line.quantity == 1000
