"""
Tests for create_repositories backend selection
"""
import httpx
import pytest
from datetime import datetime

from quicksell.core.config import Settings
from quicksell.repositories.local_repository import SALES_KEY
from quicksell.repositories import (
    LocalCatalogRepository,
    LocalSaleRepository,
    RemoteCatalogRepository,
    RemoteSaleRepository,
    create_repositories,
)


def _settings(tmp_path, **overrides):
    return Settings(DATA_DIR=str(tmp_path), **overrides)


def _up(request):
    return httpx.Response(200, json=[])


def _down(request):
    raise httpx.ConnectError("connection refused", request=request)


class TestCreateRepositories:
    """Test storage backend selection"""

    def test_local_backend(self, tmp_path):
        catalog, sales = create_repositories(_settings(tmp_path, STORAGE_BACKEND="local", SERVER_URL="http://x"))

        assert isinstance(catalog, LocalCatalogRepository)
        assert isinstance(sales, LocalSaleRepository)

    def test_auto_without_server_url_is_local(self, tmp_path):
        catalog, _ = create_repositories(_settings(tmp_path))

        assert catalog.backend == "local"

    def test_auto_with_reachable_server_is_remote(self, tmp_path):
        settings = _settings(tmp_path, SERVER_URL="http://pos.test/api")

        catalog, sales = create_repositories(settings, transport=httpx.MockTransport(_up))

        assert isinstance(catalog, RemoteCatalogRepository)
        assert isinstance(sales, RemoteSaleRepository)

    def test_auto_falls_back_when_server_down(self, tmp_path):
        settings = _settings(tmp_path, SERVER_URL="http://pos.test/api")

        catalog, sales = create_repositories(settings, transport=httpx.MockTransport(_down))

        assert catalog.backend == "local"
        assert sales.backend == "local"

    def test_remote_never_falls_back(self, tmp_path):
        settings = _settings(tmp_path, STORAGE_BACKEND="remote", SERVER_URL="http://pos.test/api")

        catalog, _ = create_repositories(settings, transport=httpx.MockTransport(_down))

        assert catalog.backend == "remote"

    def test_remote_without_server_url_fails(self, tmp_path):
        with pytest.raises(ValueError):
            create_repositories(_settings(tmp_path, STORAGE_BACKEND="remote"))

    def test_unknown_backend_fails(self, tmp_path):
        with pytest.raises(ValueError):
            create_repositories(_settings(tmp_path, STORAGE_BACKEND="floppy"))

    def test_demo_sales_seeded_when_enabled(self, tmp_path):
        _, sales = create_repositories(_settings(tmp_path, STORAGE_BACKEND="local", SEED_DEMO_SALES=True))

        seeded = sales.list_sales()

        assert (tmp_path / f"{SALES_KEY}.json").exists()
        assert all(sale.sold_at.year == datetime.now().year for sale in seeded)
