"""
Shared pytest fixtures for the catalog and order service tests.

These fixtures provide consistent test data and fresh state per test.
"""

from decimal import Decimal
from pathlib import Path

import pytest

from ordering.messaging import EventBus
from shared.data_store import DataStore
from shared.exceptions import CatalogUnavailableError, MenuItemNotFoundError
from shared.models import Customer, MenuItem


class FakeCatalog:
    """
    Stand-in for the catalog gateway.

    Resolves from a dict of menu items and records every lookup. Ids listed
    in `unavailable` raise CatalogUnavailableError; unknown ids raise
    MenuItemNotFoundError.
    """

    def __init__(self, items: list[MenuItem], unavailable: tuple[str, ...] = ()):
        self.items = {item.id: item for item in items}
        self.unavailable = set(unavailable)
        self.calls: list[str] = []

    def resolve(self, product_id: str) -> MenuItem:
        self.calls.append(product_id)
        if product_id in self.unavailable:
            raise CatalogUnavailableError()
        if product_id not in self.items:
            raise MenuItemNotFoundError(product_id)
        return self.items[product_id]


@pytest.fixture
def data_dir() -> Path:
    """Path to the JSON fixture directory."""
    return Path(__file__).parent.parent / "data"


@pytest.fixture
def data_store(data_dir: Path) -> DataStore:
    """
    Fresh DataStore seeded from the JSON fixtures.

    Five menu items (menu-001 .. menu-005), no orders.
    """
    return DataStore(data_dir=data_dir)


@pytest.fixture
def empty_data_store() -> DataStore:
    """DataStore with nothing in it."""
    return DataStore()


@pytest.fixture
def event_bus() -> EventBus:
    """Fresh event bus for each test."""
    return EventBus()


# =============================================================================
# Domain Fixtures
# =============================================================================

@pytest.fixture
def customer() -> Customer:
    return Customer(full_name="John Doe", address="123 Main St", email="john@email.com")


@pytest.fixture
def burger() -> MenuItem:
    return MenuItem(id="menu-1", name="Classic Burger", description="Artisan burger", price=Decimal("12.90"))


@pytest.fixture
def fries() -> MenuItem:
    return MenuItem(id="menu-2", name="Fries", description="Crispy fries", price=Decimal("5.50"))


@pytest.fixture
def fake_catalog(burger: MenuItem, fries: MenuItem) -> FakeCatalog:
    """Catalog that knows menu-1 (burger) and menu-2 (fries)."""
    return FakeCatalog([burger, fries])


@pytest.fixture
def customer_payload() -> dict:
    return {"full_name": "John Doe", "address": "123 Main St", "email": "john@email.com"}


@pytest.fixture
def make_catalog():
    """Factory for catalogs with a custom menu or unavailable ids."""
    return FakeCatalog
