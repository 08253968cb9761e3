"""
Repository Layer - Data Access

Two interchangeable backends implement the catalog and sale stores:
- remote: the QuickSell REST API (RemoteApiClient over httpx)
- local: JSON documents on disk (BlobStore)

The backend is chosen once, at startup, by create_repositories().

Author: QuickSell
Date: 2025-10-17
"""
import logging
from typing import Tuple

from quicksell.core.config import Settings
from quicksell.core.exceptions import QuickSellError
from quicksell.repositories.base import CatalogRepository, SaleRepository
from quicksell.repositories.local_repository import BlobStore, LocalCatalogRepository, LocalSaleRepository
from quicksell.repositories.remote_repository import RemoteApiClient, RemoteCatalogRepository, RemoteSaleRepository

logger = logging.getLogger(__name__)


def _local_repositories(settings: Settings) -> Tuple[CatalogRepository, SaleRepository]:
    blob_store = BlobStore(settings.DATA_DIR)
    sale_defaults = None
    if settings.SEED_DEMO_SALES:
        from quicksell.services.seed_service import generate_demo_sales
        from quicksell.domain.catalog import default_products

        def sale_defaults():
            return generate_demo_sales(default_products())

    logger.info(f"Using local storage in {settings.DATA_DIR}")
    return LocalCatalogRepository(blob_store), LocalSaleRepository(blob_store, defaults=sale_defaults)


def create_repositories(settings: Settings, transport=None) -> Tuple[CatalogRepository, SaleRepository]:
    """
    Build the catalog and sale stores for the configured backend

    Args:
        settings: Application settings
        transport: Optional httpx transport for the remote client (tests)

    Returns:
        Tuple of (catalog repository, sale repository)

    Raises:
        ValueError: STORAGE_BACKEND is 'remote' but SERVER_URL is not set,
            or STORAGE_BACKEND is unknown
    """
    backend = settings.get_storage_backend()

    if backend == "local":
        return _local_repositories(settings)

    if not settings.SERVER_URL:
        if backend == "remote":
            raise ValueError("STORAGE_BACKEND=remote requires SERVER_URL")
        return _local_repositories(settings)

    client = RemoteApiClient(settings.SERVER_URL, timeout=settings.REMOTE_TIMEOUT_SECONDS, transport=transport)

    if backend == "auto":
        try:
            client.request('GET', '/products')
        except QuickSellError as e:
            logger.warning(f"Remote store at {settings.SERVER_URL} unavailable ({e.message}), falling back to local storage")
            client.close()
            return _local_repositories(settings)

    logger.info(f"Using remote storage at {settings.SERVER_URL}")
    return RemoteCatalogRepository(client), RemoteSaleRepository(client)


__all__ = [
    'CatalogRepository',
    'SaleRepository',
    'BlobStore',
    'LocalCatalogRepository',
    'LocalSaleRepository',
    'RemoteApiClient',
    'RemoteCatalogRepository',
    'RemoteSaleRepository',
    'create_repositories',
]
