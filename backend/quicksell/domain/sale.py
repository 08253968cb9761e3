"""
Sale Domain Models

Represents cart lines and settled sales.

A Sale carries frozen copies of the product fields at sale time (price, cost,
name, company) plus the per-line quantity and discount, so historical reports
stay accurate when the catalog changes later.

Author: QuickSell
Date: 2025-10-17
"""
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from datetime import datetime
from decimal import Decimal

from quicksell.domain.product import Product, to_plain


class PaymentMethod(str, Enum):
    """Accepted payment methods"""
    CASH = "Cash"
    CARD = "Card"
    TRANSFER = "Transfer"


class CartItem(Product):
    """
    Cart line - a product snapshot plus transaction-specific fields

    Fields:
        quantity: Units on this line
        discount: Line discount as a percentage in [0, 100]
    """

    quantity: int = Field(1, description="Units on this line", ge=0)
    discount: Decimal = Field(Decimal('0'), description="Discount percent", ge=0, le=100)

    @classmethod
    def from_product(cls, product: Product) -> "CartItem":
        """New line for a product: quantity 1, no discount"""
        return cls(**product.model_dump(), quantity=1, discount=Decimal('0'))


class Sale(BaseModel):
    """
    Sale domain model - an immutable settled transaction

    Fields:
        id: Unique sale ID
        timestamp: Sale time in epoch milliseconds
        total_amount: Sum of line totals
        profit: Sum of line profits (can be negative)
        payment_method: Cash, Card or Transfer
        discount: Sum of line discount amounts (currency, not percent)
        items: Ordered line snapshots
    """

    id: str = Field(..., description="Sale ID", min_length=1)
    timestamp: int = Field(..., description="Epoch milliseconds", ge=0)
    total_amount: Decimal = Field(..., alias="totalAmount", description="Sum of line totals")
    profit: Decimal = Field(..., description="Sum of line profits")
    payment_method: PaymentMethod = Field(..., alias="paymentMethod", description="Payment method")
    discount: Decimal = Field(Decimal('0'), description="Total discount amount", ge=0)
    items: List[CartItem] = Field(..., description="Line snapshots", min_length=1)

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
    )

    @property
    def sold_at(self) -> datetime:
        """Sale time as a local datetime"""
        return datetime.fromtimestamp(self.timestamp / 1000)

    @property
    def units(self) -> int:
        """Total units across all lines"""
        return sum(item.quantity for item in self.items)

    def to_record(self) -> dict:
        """Stored/wire shape: camelCase keys, Decimals as floats"""
        return to_plain(self.model_dump(by_alias=True))
