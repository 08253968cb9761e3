"""
Cart Engine - in-memory line items for the active checkout session

Holds the ordered cart lines, the active line selection and the keypad entry
buffer. Totals are plain functions of the current lines and are recomputed on
every read.

The cart does not re-check live stock after a product is first added: a line
may be raised above the stock on hand, and settlement clamps the decrement at
zero.

Author: QuickSell
Date: 2025-10-17
"""
import re
from enum import Enum
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional

from quicksell.core.exceptions import ValidationError
from quicksell.domain.product import Product
from quicksell.domain.sale import CartItem

ZERO = Decimal('0')
HUNDRED = Decimal('100')

# Leading number, the way a keypad string like "12." or "3.5.1" reads
_NUMBER_PREFIX = re.compile(r'\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')

# Keypad values are bounded so "1e999999" cannot become a huge integer
_MAX_INPUT = Decimal('1e12')

KEYPAD_KEYS = frozenset("0123456789.C")


class CartField(str, Enum):
    """Line fields the keypad can edit"""
    QUANTITY = "quantity"
    DISCOUNT = "discount"
    PRICE = "price"


# ============================================================================
# Line pricing
# ============================================================================

def line_total(line: CartItem) -> Decimal:
    """Selling price after the line discount, times quantity"""
    return line.selling_price * (1 - line.discount / HUNDRED) * line.quantity


def line_profit(line: CartItem) -> Decimal:
    """Discounted price minus cost, times quantity"""
    return (line.selling_price * (1 - line.discount / HUNDRED) - line.cost_price) * line.quantity


def line_discount_value(line: CartItem) -> Decimal:
    """Currency amount taken off by the line discount"""
    return line.selling_price * (line.discount / HUNDRED) * line.quantity


def cart_total(lines: Iterable[CartItem]) -> Decimal:
    return sum((line_total(line) for line in lines), ZERO)


def parse_number(raw_value) -> Decimal:
    """
    Parse keypad/form input into a Decimal

    Empty or unparseable input is 0. Strings are read up to the first
    character that cannot continue a number ("12.5x" -> 12.5, "1e3" -> 1000).
    Results are bounded to +/- 1e12.
    """
    if raw_value is None or isinstance(raw_value, bool):
        return ZERO
    if isinstance(raw_value, Decimal):
        value = raw_value
    elif isinstance(raw_value, int):
        value = Decimal(raw_value)
    elif isinstance(raw_value, float):
        value = Decimal(str(raw_value))
    else:
        match = _NUMBER_PREFIX.match(str(raw_value))
        if not match:
            return ZERO
        try:
            value = Decimal(match.group(1))
        except InvalidOperation:
            return ZERO

    if not value.is_finite():
        return ZERO
    return max(-_MAX_INPUT, min(_MAX_INPUT, value))


# ============================================================================
# Cart
# ============================================================================

class Cart:
    """
    Ordered cart lines with an optional active line

    Invariants:
    - no two lines share a product id
    - active_index is None or a valid index into lines
    """

    def __init__(self):
        self._lines: List[CartItem] = []
        self.active_index: Optional[int] = None
        self.entry_mode: CartField = CartField.QUANTITY
        self.entry_buffer: str = ""

    @property
    def lines(self) -> List[CartItem]:
        return list(self._lines)

    @property
    def active_line(self) -> Optional[CartItem]:
        if self.active_index is None:
            return None
        return self._lines[self.active_index]

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def total(self) -> Decimal:
        return cart_total(self._lines)

    def profit(self) -> Decimal:
        return sum((line_profit(line) for line in self._lines), ZERO)

    def discount_value(self) -> Decimal:
        return sum((line_discount_value(line) for line in self._lines), ZERO)

    def add_line(self, product: Product) -> Optional[CartItem]:
        """
        Add one unit of a product

        Out-of-stock products are ignored (returns None). A product already in
        the cart gets its quantity raised by one; otherwise a new line is
        appended. Either way the line becomes active.
        """
        if product.stock_qty <= 0:
            return None

        self.entry_buffer = ""
        for index, line in enumerate(self._lines):
            if line.id == product.id:
                line.quantity += 1
                self.active_index = index
                return line

        line = CartItem.from_product(product)
        self._lines.append(line)
        self.active_index = len(self._lines) - 1
        return line

    def remove_line(self, index: int) -> CartItem:
        """Remove a line, keeping the active selection on the same logical line"""
        if not 0 <= index < len(self._lines):
            raise IndexError(f"Cart line {index} does not exist")

        removed = self._lines.pop(index)
        if self.active_index == index:
            self.active_index = None
        elif self.active_index is not None and self.active_index > index:
            self.active_index -= 1
        self.entry_buffer = ""
        return removed

    def select_line(self, index: Optional[int]) -> None:
        """Make a line active; None clears the selection"""
        if index is not None and not 0 <= index < len(self._lines):
            raise IndexError(f"Cart line {index} does not exist")
        self.active_index = index
        self.entry_buffer = ""

    def set_active_field(self, field, raw_value) -> Optional[CartItem]:
        """
        Overwrite a field of the active line from raw input

        - quantity: whole units; 0 or unparseable resets to 1, negatives become 0
        - discount: clamped into [0, 100]
        - price: negatives become 0

        No-op (returns None) when no line is active.
        """
        try:
            field = CartField(field)
        except ValueError:
            raise ValidationError(f"Unknown cart field '{field}'")

        line = self.active_line
        if line is None:
            return None

        value = parse_number(raw_value)
        if field is CartField.QUANTITY:
            quantity = int(value) or 1
            line.quantity = max(0, quantity)
        elif field is CartField.DISCOUNT:
            line.discount = min(HUNDRED, max(ZERO, value))
        else:
            line.selling_price = max(ZERO, value)
        return line

    def set_entry_mode(self, mode) -> None:
        """Switch which field keypad presses edit"""
        try:
            self.entry_mode = CartField(mode)
        except ValueError:
            raise ValidationError(f"Unknown cart field '{mode}'")
        self.entry_buffer = ""

    def press_key(self, key: str) -> Optional[CartItem]:
        """
        Feed one keypad key

        Keys are single characters: digits, "." or "C". "C" clears the buffer
        (and applies the empty value); anything else is appended and the whole
        buffer is applied to the active line.
        """
        if not isinstance(key, str) or len(key) != 1 or key not in KEYPAD_KEYS:
            raise ValidationError(f"Unknown keypad key '{key}'", payload={'allowed': sorted(KEYPAD_KEYS)})

        if key == "C":
            self.entry_buffer = ""
        else:
            self.entry_buffer += key
        return self.set_active_field(self.entry_mode, self.entry_buffer)

    def clear(self) -> None:
        self._lines = []
        self.active_index = None
        self.entry_buffer = ""

    def to_dict(self) -> dict:
        """Cart state with per-line and overall totals"""
        return {
            'lines': [
                {
                    **line.to_record(),
                    'lineTotal': float(line_total(line)),
                    'lineProfit': float(line_profit(line)),
                    'lineDiscountValue': float(line_discount_value(line)),
                }
                for line in self._lines
            ],
            'activeIndex': self.active_index,
            'entryMode': self.entry_mode.value,
            'entryBuffer': self.entry_buffer,
            'total': float(self.total()),
            'discount': float(self.discount_value()),
            'itemCount': sum(line.quantity for line in self._lines),
        }
