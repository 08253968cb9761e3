"""
Catalog Service - validated product management

Validation happens here, before anything reaches the catalog store.
"""
import random
import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from quicksell.core.exceptions import NotFound, ValidationError
from quicksell.domain.product import Product, ProductCreate
from quicksell.repositories.base import CatalogRepository

logger = logging.getLogger(__name__)

ALL = "All"

# camelCase alias -> field name, so edits can use either spelling
_FIELD_NAMES = {
    (field.alias or name): name for name, field in Product.model_fields.items()
}
_FIELD_NAMES.update({name: name for name in Product.model_fields})


def _normalize_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    unknown = [key for key in changes if key not in _FIELD_NAMES]
    if unknown:
        raise ValidationError(f"Unknown product fields: {', '.join(sorted(unknown))}")
    return {_FIELD_NAMES[key]: value for key, value in changes.items()}


class CatalogService:
    """Service for product catalog business logic"""

    def __init__(self, catalog: CatalogRepository):
        self.catalog = catalog

    def list_products(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        company: Optional[str] = None,
        low_stock: Optional[bool] = None,
    ) -> List[Product]:
        """
        Products matching every given filter

        Args:
            search: Case-insensitive substring of name or SKU
            category: Exact category ('All' or None for any)
            company: Exact company ('All' or None for any)
            low_stock: True for products at or below reorder level, False for the rest
        """
        term = (search or "").strip().lower()
        products = []
        for product in self.catalog.list_products():
            if term and term not in product.name.lower() and term not in product.sku.lower():
                continue
            if category not in (None, ALL) and product.category != category:
                continue
            if company not in (None, ALL) and product.company != company:
                continue
            if low_stock is not None and product.is_low_stock != low_stock:
                continue
            products.append(product)
        return products

    def get_product(self, product_id: str) -> Product:
        for product in self.catalog.list_products():
            if product.id == product_id:
                return product
        raise NotFound(f"Product {product_id} not found")

    def _check_unique_sku(self, sku: str, exclude_id: Optional[str] = None) -> None:
        for product in self.catalog.list_products():
            if product.sku == sku and product.id != exclude_id:
                raise ValidationError(f"SKU '{sku}' is already used by {product.name}", payload={'sku': sku})

    def _generate_sku(self) -> str:
        taken = {product.sku for product in self.catalog.list_products()}
        while True:
            sku = f"SKU-{random.randint(1000, 9999)}"
            if sku not in taken:
                return sku

    def add_product(self, data: Union[ProductCreate, Dict[str, Any]]) -> Product:
        """Validate and store a new product. An empty SKU gets a generated one."""
        try:
            fields = data if isinstance(data, ProductCreate) else ProductCreate.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic("Invalid product", e)

        fields = fields.model_copy(update={'name': fields.name.strip(), 'sku': fields.sku.strip()})
        if not fields.name:
            raise ValidationError("Product name is required")

        if fields.sku:
            self._check_unique_sku(fields.sku)
        else:
            fields.sku = self._generate_sku()

        product = self.catalog.create_product(fields)
        logger.info(f"Product {product.id} ({product.sku}) added with {product.stock_qty} units")
        return product

    def update_product(self, product_id: str, changes: Dict[str, Any]) -> Product:
        """Apply a partial edit, validate the result and replace the stored product"""
        current = self.get_product(product_id)
        merged = {**current.model_dump(), **_normalize_changes(changes), 'id': product_id}

        try:
            product = Product.model_validate(merged)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic("Invalid product", e)

        if product.sku != current.sku:
            self._check_unique_sku(product.sku, exclude_id=product_id)

        self.catalog.update_product(product)
        logger.info(f"Product {product_id} updated")
        return product

    def restock(self, product_id: str, amount: int) -> Product:
        """Add received units to a product's stock"""
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError("Restock amount must be a positive whole number", payload={'amount': amount})

        product = self.get_product(product_id)
        updated = product.model_copy(update={'stock_qty': product.stock_qty + amount})
        self.catalog.update_product(updated)
        logger.info(f"Product {product_id} restocked: {product.stock_qty} -> {updated.stock_qty}")
        return updated

    def delete_product(self, product_id: str) -> None:
        """Delete a product. Sales that reference it keep their snapshots."""
        self.get_product(product_id)
        self.catalog.delete_product(product_id)
        logger.info(f"Product {product_id} deleted")

    def categories(self) -> List[str]:
        return sorted({p.category for p in self.catalog.list_products() if p.category})

    def companies(self) -> List[str]:
        return sorted({p.company for p in self.catalog.list_products() if p.company})
