"""
Store contracts shared by every storage backend

The services depend only on these two interfaces and never check which
backend is active.

Author: QuickSell
Date: 2025-10-17
"""
from abc import ABC, abstractmethod
from typing import List

from quicksell.domain.product import Product, ProductCreate
from quicksell.domain.sale import Sale


class CatalogRepository(ABC):
    """
    Catalog store: the collection of Product records

    Writes must be durable before the call returns.
    """

    backend = ""

    @abstractmethod
    def list_products(self) -> List[Product]:
        """All products in the catalog"""

    @abstractmethod
    def create_product(self, data: ProductCreate) -> Product:
        """Store a new product and return it with its assigned id"""

    @abstractmethod
    def update_product(self, product: Product) -> None:
        """Replace the product with the same id. Raises NotFound when absent."""

    @abstractmethod
    def delete_product(self, product_id: str) -> None:
        """Delete a product. Raises NotFound when absent."""


class SaleRepository(ABC):
    """Sale store: the collection of settled Sale records"""

    backend = ""

    @abstractmethod
    def list_sales(self) -> List[Sale]:
        """All recorded sales"""

    @abstractmethod
    def create_sale(self, sale: Sale) -> None:
        """Persist a settled sale"""

    @abstractmethod
    def delete_sale(self, sale_id: str) -> None:
        """Delete a sale. Raises NotFound when absent."""
