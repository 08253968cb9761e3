"""
Product Domain Model

Represents a product entity in the QuickSell catalog.
This is the single source of truth for product data structure.

Field names are snake_case in Python; every field also carries the camelCase
alias used by the stored records and the remote API (costPrice, stockQty, ...).
Models accept either spelling on input.

Author: QuickSell
Date: 2025-10-17
"""
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from decimal import Decimal


def to_plain(value):
    """
    Convert a dumped model into JSON-ready primitives

    Decimal -> float and Enum -> value, recursively through dicts and lists.
    """
    if isinstance(value, dict):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_plain(item) for item in value]
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    return value


class ProductFields(BaseModel):
    """
    Fields shared by a stored product and a product about to be created

    Fields:
        name: Product name
        sku: Stock Keeping Unit (unique, displayable)
        category: Product category (Writing, Paper, ...)
        company: Brand / manufacturer
        cost_price: Purchase/cost price
        selling_price: Selling price
        stock_qty: Units on hand, never negative
        reorder_level: Threshold at or below which the product is flagged low
    """

    name: str = Field(..., description="Product name", min_length=1)
    sku: str = Field("", description="Stock Keeping Unit")
    category: str = Field("", description="Product category")
    company: str = Field("", description="Brand / manufacturer")

    # Pricing
    cost_price: Decimal = Field(Decimal('0'), alias="costPrice", description="Cost/purchase price", ge=0)
    selling_price: Decimal = Field(Decimal('0'), alias="sellingPrice", description="Selling price", ge=0)

    # Inventory
    stock_qty: int = Field(0, alias="stockQty", description="Units on hand", ge=0)
    reorder_level: int = Field(5, alias="reorderLevel", description="Low stock threshold", ge=0)

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
    )

    def to_record(self) -> dict:
        """Stored/wire shape: camelCase keys, Decimals as floats"""
        return to_plain(self.model_dump(by_alias=True))


class ProductCreate(ProductFields):
    """A product without an id, as handed to the catalog store for creation"""


class Product(ProductFields):
    """
    Product domain model - represents a product in the catalog

    Stock is mutated by edits, restocks, sale settlement and sale void.
    """

    id: str = Field(..., description="Product ID", min_length=1)

    @property
    def is_low_stock(self) -> bool:
        """Check if product stock is at or below its reorder level"""
        return self.stock_qty <= self.reorder_level

    @property
    def is_out_of_stock(self) -> bool:
        """Check if product is out of stock"""
        return self.stock_qty <= 0

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Returns the record shape plus the stock flags used by the UI
        """
        data = self.to_record()
        data['isLowStock'] = self.is_low_stock
        data['isOutOfStock'] = self.is_out_of_stock
        return data
