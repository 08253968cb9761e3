"""
Settlement Service - turns the cart into a recorded sale

Checkout steps:
1. Reject an empty cart (no sale, no store calls)
2. Compute totals from the line pricing functions
3. Snapshot every cart line into the sale
4. Persist the sale through the sale store
5. Decrement matching product stock, floored at zero, through the catalog store
6. Clear the cart

The two stores share no transaction. If step 5 fails after step 4 succeeded,
the sale stays recorded with stock not (fully) decremented; the error reaches
the caller and the cart is kept so the operation can be looked at and retried.
Stock is read then written without compare-and-swap: checkout calls must not
run concurrently against the same catalog.

Author: QuickSell
Date: 2025-10-17
"""
import time
import uuid
import logging
from typing import Callable, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from quicksell.core.exceptions import QuickSellError, ValidationError
from quicksell.domain.sale import CartItem, PaymentMethod, Sale
from quicksell.repositories.base import CatalogRepository, SaleRepository
from quicksell.services.cart_engine import Cart, line_discount_value, line_profit, line_total, ZERO

logger = logging.getLogger(__name__)


def epoch_millis() -> int:
    return int(time.time() * 1000)


def generate_sale_id() -> str:
    return uuid.uuid4().hex[:10].upper()


def parse_payment_method(value) -> PaymentMethod:
    """Accept a PaymentMethod or its string value (case-insensitive)"""
    if isinstance(value, PaymentMethod):
        return value
    for method in PaymentMethod:
        if isinstance(value, str) and value.strip().lower() == method.value.lower():
            return method
    raise ValidationError(
        f"Unknown payment method '{value}'",
        payload={'allowed': [m.value for m in PaymentMethod]},
    )


class SettlementService:
    """Service for converting a cart into a Sale and applying its stock impact"""

    def __init__(
        self,
        catalog: CatalogRepository,
        sales: SaleRepository,
        clock: Callable[[], int] = epoch_millis,
        id_factory: Callable[[], str] = generate_sale_id,
    ):
        self.catalog = catalog
        self.sales = sales
        self.clock = clock
        self.id_factory = id_factory

    def build_sale(self, cart: Cart, payment_method) -> Sale:
        """Snapshot the cart into a Sale record without persisting anything"""
        method = parse_payment_method(payment_method)

        try:
            # Revalidated copies: line fields can be assigned without validation
            lines = [CartItem.model_validate(line.model_dump()) for line in cart.lines]
            return Sale(
                id=self.id_factory(),
                timestamp=self.clock(),
                total_amount=sum((line_total(line) for line in lines), ZERO),
                profit=sum((line_profit(line) for line in lines), ZERO),
                payment_method=method,
                discount=sum((line_discount_value(line) for line in lines), ZERO),
                items=lines,
            )
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic("Cart cannot be settled", e)

    def checkout(self, cart: Cart, payment_method) -> Optional[Sale]:
        """
        Settle the cart

        Args:
            cart: The active cart (cleared on success)
            payment_method: PaymentMethod or 'Cash' / 'Card' / 'Transfer'

        Returns:
            The recorded Sale, or None when the cart is empty

        Raises:
            ValidationError: Unknown payment method or invalid line (before any store call)
            StoreUnavailable: A store failed; the cart is left intact
        """
        if cart.is_empty:
            logger.debug("Checkout ignored: cart is empty")
            return None

        sale = self.build_sale(cart, payment_method)

        try:
            self.sales.create_sale(sale)
            logger.debug(f"Sale {sale.id} recorded")
            self._decrement_stock(sale)
        except QuickSellError as e:
            logger.error(f"Checkout failed for sale {sale.id}: {e.message}")
            raise

        cart.clear()
        logger.info(
            f"Sale {sale.id} settled: {len(sale.items)} lines, total {sale.total_amount:.2f}, "
            f"paid by {sale.payment_method.value}"
        )
        return sale

    def _decrement_stock(self, sale: Sale) -> None:
        sold: Dict[str, int] = {}
        for item in sale.items:
            sold[item.id] = sold.get(item.id, 0) + item.quantity

        for product in self.catalog.list_products():
            quantity = sold.pop(product.id, None)
            if quantity is None:
                continue

            new_stock = max(0, product.stock_qty - quantity)
            if new_stock != product.stock_qty - quantity:
                logger.warning(
                    f"Sale {sale.id}: {product.sku} sold {quantity} with {product.stock_qty} on hand, stock clamped at 0"
                )
            self.catalog.update_product(product.model_copy(update={'stock_qty': new_stock}))

        for product_id in sold:
            logger.warning(f"Sale {sale.id}: product {product_id} no longer in catalog, stock not adjusted")
