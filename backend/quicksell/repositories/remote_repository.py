"""
Remote Repositories - products and sales over the QuickSell REST API

Handles all interactions with the remote server:
- GET/POST /products, PUT/DELETE /products/{id}
- GET/POST /sales, DELETE /sales/{id}

Bodies use the camelCase record shape shared with local storage.

Author: QuickSell
Date: 2025-10-17
"""
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from quicksell.core.exceptions import NotFound, StoreUnavailable, ValidationError
from quicksell.domain.product import Product, ProductCreate
from quicksell.domain.sale import Sale
from quicksell.repositories.base import CatalogRepository, SaleRepository

logger = logging.getLogger(__name__)


class RemoteApiClient:
    """
    Thin JSON client for the QuickSell server

    Error mapping:
    - Transport errors, timeouts, 5xx -> StoreUnavailable
    - 404 -> NotFound
    - Other 4xx -> ValidationError
    """

    def __init__(self, base_url: str, timeout: float = 5.0, transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize remote client

        Args:
            base_url: Server base URL (e.g., 'http://localhost:4000/api')
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        if not base_url:
            raise ValueError("Remote storage not configured. Set SERVER_URL")

        self.base_url = base_url.rstrip('/')
        self.client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={'Content-Type': 'application/json'},
        )

    def request(self, method: str, path: str, json: Any = None) -> Any:
        """Execute a request and return the decoded JSON body (None when empty)"""
        try:
            response = self.client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise StoreUnavailable(f"Remote store unreachable: {e}")

        logger.debug(f"{method} {path} -> {response.status_code}")

        if response.status_code == 404:
            raise NotFound(f"{path} not found on remote store")
        if response.status_code >= 500:
            raise StoreUnavailable(f"Remote store error {response.status_code} on {method} {path}")
        if response.status_code >= 400:
            raise ValidationError(
                f"Remote store rejected {method} {path}",
                payload={'remote_status': response.status_code, 'remote_body': response.text[:500]},
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            if method == 'GET':
                raise StoreUnavailable(f"Remote store returned invalid JSON for {path}: {e}")
            return None

    def close(self) -> None:
        self.client.close()


def _parse_list(model, records: Any, what: str) -> list:
    if not isinstance(records, list):
        raise StoreUnavailable(f"Remote store returned malformed {what} list")
    try:
        return [model.model_validate(record) for record in records]
    except PydanticValidationError as e:
        raise StoreUnavailable(f"Remote store returned malformed {what}: {e}")


class RemoteCatalogRepository(CatalogRepository):
    """Catalog store backed by the remote API"""

    backend = "remote"

    def __init__(self, client: RemoteApiClient):
        self.client = client

    def list_products(self) -> List[Product]:
        return _parse_list(Product, self.client.request('GET', '/products'), 'products')

    def create_product(self, data: ProductCreate) -> Product:
        body: Dict[str, Any] = self.client.request('POST', '/products', json=data.to_record())
        try:
            return Product.model_validate(body)
        except PydanticValidationError as e:
            raise StoreUnavailable(f"Remote store returned malformed product: {e}")

    def update_product(self, product: Product) -> None:
        self.client.request('PUT', f"/products/{quote(product.id, safe='')}", json=product.to_record())

    def delete_product(self, product_id: str) -> None:
        self.client.request('DELETE', f"/products/{quote(product_id, safe='')}")


class RemoteSaleRepository(SaleRepository):
    """Sale store backed by the remote API"""

    backend = "remote"

    def __init__(self, client: RemoteApiClient):
        self.client = client

    def list_sales(self) -> List[Sale]:
        return _parse_list(Sale, self.client.request('GET', '/sales'), 'sales')

    def create_sale(self, sale: Sale) -> None:
        self.client.request('POST', '/sales', json=sale.to_record())

    def delete_sale(self, sale_id: str) -> None:
        self.client.request('DELETE', f"/sales/{quote(sale_id, safe='')}")
