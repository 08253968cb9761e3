"""
Demo sales generator

Fills a fresh local store with a plausible year-to-date sales history so the
dashboard and reports have something to show.
"""
import random
import string
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from quicksell.domain.product import Product
from quicksell.domain.sale import CartItem, PaymentMethod, Sale
from quicksell.services.cart_engine import line_discount_value, line_profit, line_total, ZERO


def _demo_sale_id(rng: random.Random, month: int, day: int, used_ids: set) -> str:
    while True:
        suffix = "".join(rng.choices(string.ascii_uppercase + string.digits, k=4))
        sale_id = f"SALE-{month}{day}-{suffix}"
        if sale_id not in used_ids:
            used_ids.add(sale_id)
            return sale_id


def generate_demo_sales(
    products: List[Product],
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> List[Sale]:
    """
    Random sales for every month of the current year up to now

    3-8 sales per month on random days (none in the future), each with 1-3
    lines of 1-3 units and a 20% chance of a 10% line discount. Returned
    newest first.
    """
    now = now or datetime.now()
    rng = rng or random.Random()
    if not products:
        return []

    sales: List[Sale] = []
    used_ids = set()
    for month in range(1, now.month + 1):
        for _ in range(rng.randint(3, 8)):
            day = rng.randint(1, 28)
            sold_at = datetime(now.year, month, day, rng.randint(10, 17), rng.randint(0, 59))
            if sold_at > now:
                continue

            items = []
            for _ in range(rng.randint(1, 3)):
                product = rng.choice(products)
                discount = Decimal('10') if rng.random() > 0.8 else ZERO
                items.append(CartItem(**product.model_dump(), quantity=rng.randint(1, 3), discount=discount))

            sale_id = _demo_sale_id(rng, month, day, used_ids)
            sales.append(Sale(
                id=sale_id,
                timestamp=int(sold_at.timestamp() * 1000),
                total_amount=sum((line_total(item) for item in items), ZERO),
                profit=sum((line_profit(item) for item in items), ZERO),
                payment_method=rng.choice(list(PaymentMethod)),
                discount=sum((line_discount_value(item) for item in items), ZERO),
                items=items,
            ))

    return sorted(sales, key=lambda sale: sale.timestamp, reverse=True)
