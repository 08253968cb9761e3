"""
Reversal Service - voids a recorded sale and restores its stock

Void is the inverse of the settlement stock step: each line's quantity goes
back onto the matching product. Products deleted since the sale are skipped,
never recreated. When settlement had clamped a product at zero, the void
restores the full line quantity, so stock ends above its pre-sale value by the
clamped deficit.

A failed void leaves the sale and the stock as they were: product writes
already made are written back before the error is re-raised.

Author: QuickSell
Date: 2025-10-17
"""
import logging
from typing import Dict, List

from quicksell.core.exceptions import NotFound, QuickSellError
from quicksell.domain.product import Product
from quicksell.domain.sale import Sale
from quicksell.repositories.base import CatalogRepository, SaleRepository

logger = logging.getLogger(__name__)


class ReversalService:
    """Service for voiding sales"""

    def __init__(self, catalog: CatalogRepository, sales: SaleRepository):
        self.catalog = catalog
        self.sales = sales

    def find_sale(self, sale_id: str) -> Sale:
        for sale in self.sales.list_sales():
            if sale.id == sale_id:
                return sale
        raise NotFound(f"Sale {sale_id} not found")

    def void_sale(self, sale_id: str) -> Sale:
        """
        Delete a sale and put its quantities back in stock

        Args:
            sale_id: ID of the sale to void

        Returns:
            The voided Sale record

        Raises:
            NotFound: No sale with that id
            StoreUnavailable: A store failed; sale and stock are unchanged
        """
        sale = self.find_sale(sale_id)

        returned: Dict[str, int] = {}
        for item in sale.items:
            returned[item.id] = returned.get(item.id, 0) + item.quantity

        originals: List[Product] = []
        try:
            for product in self.catalog.list_products():
                quantity = returned.pop(product.id, None)
                if quantity is None:
                    continue
                self.catalog.update_product(product.model_copy(update={'stock_qty': product.stock_qty + quantity}))
                originals.append(product)

            self.sales.delete_sale(sale.id)
        except QuickSellError as e:
            logger.error(f"Void of sale {sale.id} failed: {e.message}")
            self._rollback(sale.id, originals)
            raise

        for product_id in returned:
            logger.warning(f"Sale {sale.id}: product {product_id} no longer in catalog, stock not restored")

        logger.info(f"Sale {sale.id} voided, stock restored for {len(originals)} products")
        return sale

    def _rollback(self, sale_id: str, originals: List[Product]) -> None:
        for product in originals:
            try:
                self.catalog.update_product(product)
                logger.warning(f"Sale {sale_id}: restored stock of {product.sku} rolled back to {product.stock_qty}")
            except QuickSellError as e:
                logger.error(
                    f"Sale {sale_id}: could not roll back stock of {product.sku} "
                    f"(should be {product.stock_qty}): {e.message}"
                )
