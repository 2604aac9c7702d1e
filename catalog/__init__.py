"""
Catalog service.

Owns menu items. Exposes CRUD plus offset-paginated listing over HTTP;
the order service consumes GET /menu-items/{id}.
"""

from catalog.models import (
    CreateMenuItemRequest,
    DeleteMenuItemResponse,
    MenuItemListResponse,
    MenuItemResponse,
    UpdateMenuItemRequest,
)
from catalog.service import MenuItemService

__all__ = [
    "CreateMenuItemRequest",
    "DeleteMenuItemResponse",
    "MenuItemListResponse",
    "MenuItemResponse",
    "UpdateMenuItemRequest",
    "MenuItemService",
]
