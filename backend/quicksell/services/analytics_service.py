"""
Analytics Service
Revenue, profit and stock alert figures for the dashboard and reports screens

All period boundaries are local time: "today" starts at local midnight and
"this year" at January 1st 00:00.

Author: QuickSell
Date: 2025-10-17
"""
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Any

from quicksell.domain.sale import Sale
from quicksell.repositories.base import CatalogRepository, SaleRepository

MONTH_LABELS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']

ZERO = Decimal('0')


def _millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _revenue(sales: List[Sale]) -> Decimal:
    return sum((s.total_amount for s in sales), ZERO)


def _profit(sales: List[Sale]) -> Decimal:
    return sum((s.profit for s in sales), ZERO)


class AnalyticsService:
    """Service for sales analytics"""

    def __init__(
        self,
        catalog: CatalogRepository,
        sales: SaleRepository,
        now: Callable[[], datetime] = datetime.now,
        alert_limit: int = 5,
    ):
        self.catalog = catalog
        self.sales = sales
        self.now = now
        self.alert_limit = alert_limit

    def sales_history(self) -> List[Sale]:
        """All sales, newest first"""
        return sorted(self.sales.list_sales(), key=lambda s: s.timestamp, reverse=True)

    def dashboard(self) -> Dict[str, Any]:
        """
        Dashboard metrics

        Returns:
            daily_revenue / daily_profit: sales since local midnight
            yearly_revenue / yearly_profit: sales since January 1st
            alert_count / alert_list: products at or below reorder level
            monthly_revenue: revenue per month of the current year
        """
        now = self.now()
        start_of_today = _millis(now.replace(hour=0, minute=0, second=0, microsecond=0))
        start_of_year = _millis(datetime(now.year, 1, 1))

        sales = self.sales.list_sales()
        today_sales = [s for s in sales if s.timestamp >= start_of_today]
        year_sales = [s for s in sales if s.timestamp >= start_of_year]
        low_stock = [p for p in self.catalog.list_products() if p.is_low_stock]

        buckets = [ZERO] * 12
        for sale in sales:
            sold_at = sale.sold_at
            if sold_at.year == now.year:
                buckets[sold_at.month - 1] += sale.total_amount

        return {
            'daily_revenue': float(_revenue(today_sales)),
            'daily_profit': float(_profit(today_sales)),
            'yearly_revenue': float(_revenue(year_sales)),
            'yearly_profit': float(_profit(year_sales)),
            'alert_count': len(low_stock),
            'alert_list': [p.to_dict() for p in low_stock[:self.alert_limit]],
            'monthly_revenue': [
                {'label': label, 'value': float(value)}
                for label, value in zip(MONTH_LABELS, buckets)
            ],
        }

    def reports(self) -> Dict[str, Any]:
        """
        Yearly and lifetime performance plus a per-sale timeline

        Returns:
            year_revenue, year_profit, year_avg_order (0 without sales this year),
            lifetime_revenue, lifetime_profit, current_year and timeline
            (oldest first, amounts rounded to whole currency units)
        """
        now = self.now()
        start_of_year = _millis(datetime(now.year, 1, 1))

        sales = self.sales.list_sales()
        year_sales = [s for s in sales if s.timestamp >= start_of_year]
        year_revenue = _revenue(year_sales)

        timeline = [
            {
                'time': f"{MONTH_LABELS[s.sold_at.month - 1]} {s.sold_at.day}",
                'total': round(float(s.total_amount)),
                'profit': round(float(s.profit)),
            }
            for s in sorted(sales, key=lambda s: s.timestamp)
        ]

        return {
            'year_revenue': float(year_revenue),
            'year_profit': float(_profit(year_sales)),
            'year_avg_order': float(year_revenue / len(year_sales)) if year_sales else 0.0,
            'lifetime_revenue': float(_revenue(sales)),
            'lifetime_profit': float(_profit(sales)),
            'current_year': now.year,
            'timeline': timeline,
        }
