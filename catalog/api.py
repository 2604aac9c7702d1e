"""
FastAPI application for the catalog service.

Run with:
    uv run uvicorn catalog.api:app --port 8001

The order service's catalog gateway calls GET /menu-items/{id} on this app.
"""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Query, status

from catalog.models import (
    CreateMenuItemRequest,
    DeleteMenuItemResponse,
    MenuItemListResponse,
    MenuItemResponse,
    UpdateMenuItemRequest,
)
from catalog.service import MenuItemService
from shared.config import get_settings
from shared.web import configure_logging, install_error_handlers

configure_logging(get_settings().log_level)
logger = logging.getLogger("catalog_api")

app = FastAPI(
    title="Catalog Service",
    description="Owns the restaurant menu",
    version="1.0.0",
)
install_error_handlers(app)

# Module-level instance (reset_api_state swaps it in tests)
_service: Optional[MenuItemService] = None


def get_menu_item_service() -> MenuItemService:
    global _service
    if _service is None:
        _service = MenuItemService()
    return _service


def reset_api_state(service: Optional[MenuItemService] = None) -> None:
    """Reset API state (for testing)."""
    global _service
    _service = service


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "catalog-service"}


@app.post("/menu-items", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
def create_menu_item(
    request: CreateMenuItemRequest,
    service: MenuItemService = Depends(get_menu_item_service),
) -> MenuItemResponse:
    return service.create_menu_item(request)


@app.put("/menu-items/{menu_item_id}", response_model=MenuItemResponse)
def update_menu_item(
    menu_item_id: str,
    request: UpdateMenuItemRequest,
    service: MenuItemService = Depends(get_menu_item_service),
) -> MenuItemResponse:
    return service.update_menu_item(menu_item_id, request)


@app.delete("/menu-items/{menu_item_id}", response_model=DeleteMenuItemResponse)
def delete_menu_item(
    menu_item_id: str,
    service: MenuItemService = Depends(get_menu_item_service),
) -> DeleteMenuItemResponse:
    return service.delete_menu_item(menu_item_id)


@app.get("/menu-items", response_model=MenuItemListResponse)
def get_all_menu_items(
    limit: int = Query(default=10, ge=1),
    offset: int = Query(default=0, ge=0),
    service: MenuItemService = Depends(get_menu_item_service),
) -> MenuItemListResponse:
    return service.get_all_menu_items(limit, offset)


@app.get("/menu-items/{menu_item_id}", response_model=MenuItemResponse)
def get_menu_item_by_id(
    menu_item_id: str,
    service: MenuItemService = Depends(get_menu_item_service),
) -> MenuItemResponse:
    return service.get_menu_item_by_id(menu_item_id)
