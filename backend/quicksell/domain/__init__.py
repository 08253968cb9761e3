"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.

Author: QuickSell
Date: 2025-10-17
"""
from quicksell.domain.product import Product, ProductCreate
from quicksell.domain.sale import CartItem, PaymentMethod, Sale

__all__ = ['Product', 'ProductCreate', 'CartItem', 'PaymentMethod', 'Sale']
