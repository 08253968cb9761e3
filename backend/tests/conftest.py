"""
Pytest fixtures and configuration for QuickSell Backend tests

This file provides shared fixtures that can be used across all test modules.
Stores are in-memory doubles of the catalog and sale repositories; each can be
told to fail specific calls with StoreUnavailable.

Author: QuickSell
Date: 2025-10-17
"""
import pytest
from decimal import Decimal
from typing import List
from fastapi.testclient import TestClient

from quicksell.core.config import Settings
from quicksell.core.exceptions import NotFound, StoreUnavailable
from quicksell.domain.product import Product, ProductCreate
from quicksell.domain.sale import Sale
from quicksell.main import create_app
from quicksell.repositories.base import CatalogRepository, SaleRepository


class FailingCalls:
    """Mixin: raise StoreUnavailable for calls listed in fail_on"""

    def __init__(self):
        self.fail_on = set()
        self.calls = []

    def _call(self, name):
        self.calls.append(name)
        if name in self.fail_on:
            raise StoreUnavailable(f"{name} failed")


class InMemoryCatalog(FailingCalls, CatalogRepository):
    backend = "memory"

    def __init__(self, products: List[Product] = ()):
        super().__init__()
        self.products = {p.id: p.model_copy(deep=True) for p in products}
        self._next_id = 1

    def list_products(self):
        self._call('list_products')
        return [p.model_copy(deep=True) for p in self.products.values()]

    def create_product(self, data: ProductCreate):
        self._call('create_product')
        product = Product(**data.model_dump(), id=f"NEW-{self._next_id}")
        self._next_id += 1
        self.products[product.id] = product
        return product.model_copy(deep=True)

    def update_product(self, product: Product):
        self._call('update_product')
        if product.id not in self.products:
            raise NotFound(f"Product {product.id} not found")
        self.products[product.id] = product.model_copy(deep=True)

    def delete_product(self, product_id: str):
        self._call('delete_product')
        if product_id not in self.products:
            raise NotFound(f"Product {product_id} not found")
        del self.products[product_id]

    def stock(self, product_id: str) -> int:
        return self.products[product_id].stock_qty


class InMemorySales(FailingCalls, SaleRepository):
    backend = "memory"

    def __init__(self, sales: List[Sale] = ()):
        super().__init__()
        self.sales = {s.id: s.model_copy(deep=True) for s in sales}

    def list_sales(self):
        self._call('list_sales')
        return [s.model_copy(deep=True) for s in self.sales.values()]

    def create_sale(self, sale: Sale):
        self._call('create_sale')
        self.sales[sale.id] = sale.model_copy(deep=True)

    def delete_sale(self, sale_id: str):
        self._call('delete_sale')
        if sale_id not in self.sales:
            raise NotFound(f"Sale {sale_id} not found")
        del self.sales[sale_id]


def make_product(id="P-1", name="Gel Pen", sku=None, price=100, cost=60, stock=10, reorder=5,
                 category="Writing", company="Cello") -> Product:
    return Product(
        id=id,
        name=name,
        sku=sku or f"SKU-{id}",
        category=category,
        company=company,
        cost_price=Decimal(str(cost)),
        selling_price=Decimal(str(price)),
        stock_qty=stock,
        reorder_level=reorder,
    )


@pytest.fixture
def product_factory():
    """Builds Product records with sensible defaults"""
    return make_product


@pytest.fixture
def sample_products():
    """
    Provides a small catalog for tests
    """
    return [
        make_product("P-1", "Gel Pen", price=100, cost=60, stock=10, reorder=5),
        make_product("P-2", "A5 Notebook", price=350, cost=120, stock=45, reorder=10,
                     category="Paper", company="Classmate"),
        make_product("P-3", "Sketch Set", price=750, cost=300, stock=2, reorder=5,
                     category="Art Supplies", company="Faber-Castell"),
        make_product("P-4", "Sticky Notes", price=120, cost=45, stock=0, reorder=20,
                     category="Office", company="3M"),
    ]


@pytest.fixture
def catalog(sample_products):
    """In-memory catalog store seeded with sample_products"""
    return InMemoryCatalog(sample_products)


@pytest.fixture
def sales():
    """Empty in-memory sale store"""
    return InMemorySales()


@pytest.fixture
def frozen_clock():
    """Fixed epoch-millis clock for settlement"""
    return lambda: 1_760_000_000_000


@pytest.fixture
def client(catalog, sales, tmp_path):
    """TestClient for an app wired to the in-memory stores"""
    settings = Settings(STORAGE_BACKEND="local", DATA_DIR=str(tmp_path))
    return TestClient(create_app(settings, catalog=catalog, sales_repository=sales))
