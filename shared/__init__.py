"""
Shared infrastructure for the catalog and order services.

This package contains code used by both services:
- Domain models (MenuItem, Order, Customer, ...)
- Error taxonomy
- Configuration
- In-memory document store with page-number queries
- Offset pagination over that store
"""

from shared.models import (
    Customer,
    MenuItem,
    Order,
    OrderLineItem,
    OrderStatus,
    OrderStatusEvent,
)
from shared.data_store import Collection, DataStore, Page
from shared.pagination import PageSlice, paginate

__all__ = [
    "Customer",
    "MenuItem",
    "Order",
    "OrderLineItem",
    "OrderStatus",
    "OrderStatusEvent",
    "Collection",
    "DataStore",
    "Page",
    "PageSlice",
    "paginate",
]
