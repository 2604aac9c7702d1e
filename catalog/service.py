"""
Catalog service: owns the menu.

The order service never writes here; it only looks items up by id over
HTTP when it builds an order.
"""

import logging
from typing import Optional

from catalog.models import (
    CreateMenuItemRequest,
    DeleteMenuItemResponse,
    MenuItemListResponse,
    MenuItemResponse,
    UpdateMenuItemRequest,
)
from shared.data_store import DataStore, get_data_store
from shared.exceptions import MenuItemNotFoundError, ValidationFailure
from shared.models import MenuItem, utcnow
from shared.pagination import paginate

logger = logging.getLogger("catalog_service")


class MenuItemService:
    """
    CRUD and listing over the menu_items collection.

    Example:
        service = MenuItemService(data_store)
        created = service.create_menu_item(
            CreateMenuItemRequest(name="Classic Burger", price=Decimal("12.90"))
        )
        service.get_menu_item_by_id(created.id)
    """

    def __init__(self, data_store: Optional[DataStore] = None):
        self.data_store = data_store or get_data_store()

    @property
    def _menu_items(self):
        return self.data_store.menu_items

    def create_menu_item(self, request: CreateMenuItemRequest) -> MenuItemResponse:
        menu_item = MenuItem(
            name=request.name,
            description=request.description,
            price=request.price,
            created_at=utcnow(),
        )
        saved = self._menu_items.insert(menu_item)
        logger.info(f"Menu item {saved.id} created: {saved.name} @ {saved.price}")
        return MenuItemResponse.from_menu_item(saved)

    def update_menu_item(self, menu_item_id: str, request: UpdateMenuItemRequest) -> MenuItemResponse:
        menu_item = self._get_or_raise(menu_item_id)

        updated = menu_item.model_copy(update={
            "name": request.name,
            "description": request.description,
            "price": request.price,
            "updated_at": utcnow(),
        })
        saved = self._menu_items.save(updated)
        logger.info(f"Menu item {menu_item_id} updated")
        return MenuItemResponse.from_menu_item(saved)

    def delete_menu_item(self, menu_item_id: str) -> DeleteMenuItemResponse:
        if not self._menu_items.exists(menu_item_id):
            raise MenuItemNotFoundError(menu_item_id)

        self._menu_items.delete(menu_item_id)
        logger.info(f"Menu item {menu_item_id} deleted")
        return DeleteMenuItemResponse(message="Menu item deleted successfully", id=menu_item_id)

    def get_all_menu_items(self, limit: int = 10, offset: int = 0) -> MenuItemListResponse:
        """List menu items by absolute offset, same paging rules as orders."""
        window = paginate(self._menu_items.find_page, limit, offset)
        return MenuItemListResponse(
            items=[MenuItemResponse.from_menu_item(item) for item in window.items],
            total_records=window.total,
        )

    def get_menu_item_by_id(self, menu_item_id: str) -> MenuItemResponse:
        return MenuItemResponse.from_menu_item(self._get_or_raise(menu_item_id))

    def _get_or_raise(self, menu_item_id: str) -> MenuItem:
        if not menu_item_id:
            raise ValidationFailure("Menu item id is required")
        menu_item = self._menu_items.find_by_id(menu_item_id)
        if menu_item is None:
            raise MenuItemNotFoundError(menu_item_id)
        return menu_item
