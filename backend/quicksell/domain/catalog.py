"""
Default Product Catalog
Startup inventory for a stationery shop, seeded into local storage the first
time the catalog key is read.

Author: QuickSell
Date: 2025-10-17
"""
from decimal import Decimal
from typing import List

from quicksell.domain.product import Product


def _product(id, name, sku, category, company, cost, price, stock, reorder) -> Product:
    return Product(
        id=id,
        name=name,
        sku=sku,
        category=category,
        company=company,
        cost_price=Decimal(cost),
        selling_price=Decimal(price),
        stock_qty=stock,
        reorder_level=reorder,
    )


# ================================================================================
# DEFAULT CATALOG
# ================================================================================

DEFAULT_PRODUCTS: List[Product] = [
    _product('P-001', 'Executive Fountain Pen', 'EP-FONT-01', 'Writing', 'Luxor', 450, 899, 12, 5),
    _product('P-002', 'Premium A5 Leather Notebook', 'NB-A5-PREM', 'Paper', 'Classmate', 120, 350, 45, 10),
    _product('P-003', 'Charcoal Sketching Set (12pcs)', 'ART-SK-12', 'Art Supplies', 'Faber-Castell', 300, 750, 3, 5),
    _product('P-004', 'Neon Sticky Notes (400 Sheets)', 'OFF-STK-NEO', 'Office', '3M', 45, 120, 80, 20),
    _product('P-005', 'Pro-Grip Gel Pens (Pack of 5)', 'PEN-GEL-PRO', 'Writing', 'Cello', 60, 150, 120, 25),
    _product('P-006', 'Correction Tape Pro 10m', 'OFF-CORR-TAP', 'Office', 'Deli', 35, 95, 4, 10),
    _product('P-007', 'Acrylic Paint Set (24 Colors)', 'ART-ACR-24', 'Art Supplies', 'Camlin', 280, 590, 18, 8),
    _product('P-008', 'Highlighter Set (Pastel Edition)', 'MARK-HIGH-PAST', 'Markers', 'Stabilo', 180, 420, 25, 10),
]


def default_products() -> List[Product]:
    """Fresh copies of the default catalog"""
    return [product.model_copy(deep=True) for product in DEFAULT_PRODUCTS]
