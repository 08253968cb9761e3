"""
Local Repositories - on-device storage for products and sales

Each collection is one JSON document in a key-value blob store on disk,
one file per key. Reading a key that was never written seeds it with the
collection's default value.

Author: QuickSell
Date: 2025-10-17
"""
import os
import json
import random
import string
import logging
import tempfile
from pathlib import Path
from typing import Any, Callable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from quicksell.core.exceptions import NotFound, StoreUnavailable, ValidationError
from quicksell.domain.catalog import default_products
from quicksell.domain.product import Product, ProductCreate
from quicksell.domain.sale import Sale
from quicksell.repositories.base import CatalogRepository, SaleRepository

logger = logging.getLogger(__name__)

PRODUCTS_KEY = "quicksell_inv_v1"
SALES_KEY = "quicksell_sales_v1"


class BlobStore:
    """
    JSON blob per key under a data directory

    Writes go to a temporary file first and are renamed into place, so a
    reader never sees a half-written document.
    """

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str, default_factory: Callable[[], Any]) -> Any:
        """Read a key, seeding it from default_factory when it does not exist yet"""
        path = self._path(key)
        if not path.exists():
            value = default_factory()
            logger.info(f"Seeding local key '{key}'")
            self.put(key, value)
            return value

        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read local key '{key}': {e}")
            raise StoreUnavailable(f"Could not read local data '{key}': {e}")

    def put(self, key: str, value: Any) -> None:
        """Write a key atomically"""
        path = self._path(key)
        tmp_name = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                'w', encoding='utf-8', dir=self.data_dir, prefix=f".{key}.", suffix=".tmp", delete=False
            ) as f:
                tmp_name = f.name
                json.dump(value, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
            logger.debug(f"Wrote local key '{key}'")
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error(f"Could not write local key '{key}': {e}")
            raise StoreUnavailable(f"Could not write local data '{key}': {e}")


def _generate_product_id() -> str:
    return "SKU-" + "".join(random.choices(string.ascii_uppercase + string.digits, k=5))


class LocalCatalogRepository(CatalogRepository):
    """Catalog store backed by the local blob store"""

    backend = "local"

    def __init__(self, blob_store: BlobStore, defaults: Callable[[], List[Product]] = default_products):
        self.blob_store = blob_store
        self.defaults = defaults

    def _load(self) -> List[Product]:
        records = self.blob_store.get(PRODUCTS_KEY, lambda: [p.to_record() for p in self.defaults()])
        try:
            return [Product.model_validate(record) for record in records]
        except PydanticValidationError as e:
            raise StoreUnavailable(f"Corrupt product data in local storage: {e}")

    def _save(self, products: List[Product]) -> None:
        self.blob_store.put(PRODUCTS_KEY, [p.to_record() for p in products])

    def list_products(self) -> List[Product]:
        return self._load()

    def create_product(self, data: ProductCreate) -> Product:
        products = self._load()
        existing_ids = {p.id for p in products}

        product_id = _generate_product_id()
        while product_id in existing_ids:
            product_id = _generate_product_id()

        product = Product(**data.model_dump(), id=product_id)
        if not product.sku:
            product.sku = product_id

        self._save(products + [product])
        return product

    def update_product(self, product: Product) -> None:
        products = self._load()
        for i, current in enumerate(products):
            if current.id == product.id:
                products[i] = product
                self._save(products)
                return
        raise NotFound(f"Product {product.id} not found")

    def delete_product(self, product_id: str) -> None:
        products = self._load()
        remaining = [p for p in products if p.id != product_id]
        if len(remaining) == len(products):
            raise NotFound(f"Product {product_id} not found")
        self._save(remaining)


class LocalSaleRepository(SaleRepository):
    """Sale store backed by the local blob store"""

    backend = "local"

    def __init__(self, blob_store: BlobStore, defaults: Optional[Callable[[], List[Sale]]] = None):
        self.blob_store = blob_store
        self.defaults = defaults

    def _default_records(self) -> List[dict]:
        if self.defaults is None:
            return []
        return [s.to_record() for s in self.defaults()]

    def _load(self) -> List[Sale]:
        records = self.blob_store.get(SALES_KEY, self._default_records)
        try:
            return [Sale.model_validate(record) for record in records]
        except PydanticValidationError as e:
            raise StoreUnavailable(f"Corrupt sale data in local storage: {e}")

    def _save(self, sales: List[Sale]) -> None:
        self.blob_store.put(SALES_KEY, [s.to_record() for s in sales])

    def list_sales(self) -> List[Sale]:
        return self._load()

    def create_sale(self, sale: Sale) -> None:
        sales = self._load()
        if any(s.id == sale.id for s in sales):
            raise ValidationError(f"Sale {sale.id} already exists")
        self._save(sales + [sale])

    def delete_sale(self, sale_id: str) -> None:
        sales = self._load()
        remaining = [s for s in sales if s.id != sale_id]
        if len(remaining) == len(sales):
            raise NotFound(f"Sale {sale_id} not found")
        self._save(remaining)
