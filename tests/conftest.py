"""Shared test fixtures and configuration."""
import pytest
import yaml
from pathlib import Path
from fastapi.testclient import TestClient

from app.main import app
from app.core.dependencies import get_catalog_repository, get_order_text_parser
from app.core.config import Settings
from app.services.catalog.base import CatalogProduct
from app.services.catalog.index import CatalogIndex
from app.services.catalog.repository import CatalogRepository
from app.services.catalog.in_memory_catalog import InMemoryCatalogProvider
from app.services.ordering.parser import OrderTextParser


@pytest.fixture
def test_catalog_path():
    """Return path to test catalog YAML file."""
    return Path(__file__).parent / "fixtures" / "test_catalog.yaml"


@pytest.fixture
def test_settings(test_catalog_path):
    """Override settings for testing."""
    return Settings(
        catalog_file=str(test_catalog_path),
        log_level="DEBUG",
    )


@pytest.fixture
def test_catalog(test_catalog_path):
    """Products from the test catalog, loaded synchronously."""
    with open(test_catalog_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return [CatalogProduct(**product) for product in data["products"]]


@pytest.fixture
def test_catalog_index(test_catalog):
    """Index over the test catalog."""
    return CatalogIndex(test_catalog)


@pytest.fixture
def test_catalog_repository(test_catalog_path):
    """Create catalog repository with test data."""
    provider = InMemoryCatalogProvider(catalog_file=str(test_catalog_path))
    return CatalogRepository(provider)


@pytest.fixture
def override_get_catalog_repository(test_catalog_repository):
    """Override get_catalog_repository dependency with test catalog."""
    def _override_get_catalog_repository():
        return test_catalog_repository
    return _override_get_catalog_repository


@pytest.fixture
def test_client(override_get_catalog_repository, test_settings, monkeypatch):
    """Create FastAPI test client with overrides."""
    app.dependency_overrides[get_catalog_repository] = override_get_catalog_repository
    app.dependency_overrides[get_order_text_parser] = lambda: OrderTextParser(
        status_words=test_settings.bare_item_status_words
    )

    monkeypatch.setattr("app.core.config.settings", test_settings)

    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test"
    )
