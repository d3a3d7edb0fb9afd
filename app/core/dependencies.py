"""FastAPI dependencies."""
from app.core.config import settings
from app.services.catalog.repository import CatalogRepository
from app.services.catalog.in_memory_catalog import InMemoryCatalogProvider
from app.services.ordering.parser import OrderTextParser


def get_catalog_repository() -> CatalogRepository:
    """Get catalog repository instance."""
    return CatalogRepository(provider=InMemoryCatalogProvider(settings.catalog_file))


def get_order_text_parser() -> OrderTextParser:
    """Get order text parser instance."""
    return OrderTextParser(status_words=settings.bare_item_status_words)
