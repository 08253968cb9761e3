"""
Shared application state for the API routers

One container per app: the selected stores, the services built on them, the
POS cart and the lock that serialises every stock-changing call.
"""
import threading
from dataclasses import dataclass, field

from fastapi import Request

from quicksell.core.config import Settings
from quicksell.repositories import create_repositories
from quicksell.repositories.base import CatalogRepository, SaleRepository
from quicksell.services.analytics_service import AnalyticsService
from quicksell.services.cart_engine import Cart
from quicksell.services.catalog_service import CatalogService
from quicksell.services.reversal_service import ReversalService
from quicksell.services.settlement_service import SettlementService


@dataclass
class Container:
    catalog_repository: CatalogRepository
    sale_repository: SaleRepository
    catalog: CatalogService
    settlement: SettlementService
    reversal: ReversalService
    analytics: AnalyticsService
    cart: Cart = field(default_factory=Cart)
    # Stock is read then written without compare-and-swap: one writer at a time
    lock: threading.Lock = field(default_factory=threading.Lock)


def build_container(settings: Settings, catalog: CatalogRepository = None, sales: SaleRepository = None) -> Container:
    if catalog is None or sales is None:
        catalog, sales = create_repositories(settings)

    return Container(
        catalog_repository=catalog,
        sale_repository=sales,
        catalog=CatalogService(catalog),
        settlement=SettlementService(catalog, sales),
        reversal=ReversalService(catalog, sales),
        analytics=AnalyticsService(catalog, sales, alert_limit=settings.LOW_STOCK_ALERT_LIMIT),
    )


def get_container(request: Request) -> Container:
    """FastAPI dependency: the container built by create_app()"""
    return request.app.state.container
