"""
Tests for the catalog's menu item service.
"""

from decimal import Decimal

import pytest

from catalog.models import CreateMenuItemRequest, UpdateMenuItemRequest
from catalog.service import MenuItemService
from shared.exceptions import MenuItemNotFoundError, ValidationFailure


@pytest.fixture
def service(data_store):
    return MenuItemService(data_store=data_store)


class TestCreateMenuItem:
    def test_create_assigns_id_and_timestamp(self, service, data_store):
        created = service.create_menu_item(
            CreateMenuItemRequest(name="Tomato Soup", description="Hot", price=Decimal("6.40"))
        )

        assert created.id
        assert created.price == Decimal("6.40")
        assert created.created_at is not None
        assert created.updated_at is None
        assert data_store.menu_items.count() == 6


class TestUpdateMenuItem:
    def test_update_replaces_fields(self, service):
        updated = service.update_menu_item(
            "menu-001",
            UpdateMenuItemRequest(name="Double Burger", price=Decimal("15.90")),
        )

        assert updated.id == "menu-001"
        assert updated.name == "Double Burger"
        assert updated.description is None
        assert updated.price == Decimal("15.90")
        assert updated.updated_at is not None

    def test_update_unknown_item(self, service):
        with pytest.raises(MenuItemNotFoundError):
            service.update_menu_item(
                "nope", UpdateMenuItemRequest(name="X", price=Decimal("1"))
            )


class TestDeleteMenuItem:
    def test_delete(self, service, data_store):
        result = service.delete_menu_item("menu-005")

        assert result.id == "menu-005"
        assert result.message == "Menu item deleted successfully"
        assert data_store.menu_items.exists("menu-005") is False

    def test_delete_unknown_item(self, service):
        with pytest.raises(MenuItemNotFoundError):
            service.delete_menu_item("nope")


class TestGetMenuItems:
    def test_get_by_id(self, service):
        item = service.get_menu_item_by_id("menu-002")

        assert item.name == "Fries"
        assert item.price == Decimal("5.50")

    def test_get_by_id_unknown(self, service):
        with pytest.raises(MenuItemNotFoundError) as exc_info:
            service.get_menu_item_by_id("menu-999")

        assert exc_info.value.message == "Menu Item not found with id: menu-999"

    def test_get_by_empty_id(self, service):
        with pytest.raises(ValidationFailure):
            service.get_menu_item_by_id("")

    def test_list_with_offset(self, service):
        listing = service.get_all_menu_items(limit=2, offset=3)

        assert [item.id for item in listing.items] == ["menu-004", "menu-005"]
        assert listing.total_records == 5

    def test_list_empty(self, empty_data_store):
        listing = MenuItemService(empty_data_store).get_all_menu_items()

        assert listing.items == []
        assert listing.total_records == 0
