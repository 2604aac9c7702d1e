"""
API models for the catalog service.

These Pydantic models define the contract between clients (including the
order service's catalog gateway) and the catalog HTTP API.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from shared.models import MenuItem


class CreateMenuItemRequest(BaseModel):
    """Request to add a dish to the menu."""
    name: str = Field(..., min_length=1, description="Display name")
    description: Optional[str] = Field(default=None)
    price: Decimal = Field(..., ge=0, description="Current price")


class UpdateMenuItemRequest(CreateMenuItemRequest):
    """Full replacement of a menu item's editable fields."""


class MenuItemResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: Decimal
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_menu_item(cls, menu_item: MenuItem) -> "MenuItemResponse":
        return cls(**menu_item.model_dump())


class MenuItemListResponse(BaseModel):
    items: list[MenuItemResponse] = Field(default_factory=list)
    total_records: int


class DeleteMenuItemResponse(BaseModel):
    message: str
    id: str
