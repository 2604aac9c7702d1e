"""
Persistence adapter for Order aggregates.

Page-number semantics on purpose: document stores fetch the Nth block of a
fixed size, not "skip N". Offset paging is built on top in shared.pagination.
"""

import logging
from typing import Optional

from shared.data_store import DataStore, Page, get_data_store
from shared.exceptions import OrderNotFoundError
from shared.models import Order

logger = logging.getLogger("order_store")


class OrderStore:
    """Insert, load, overwrite and page through orders."""

    def __init__(self, data_store: Optional[DataStore] = None):
        self.data_store = data_store or get_data_store()

    def insert(self, order: Order) -> Order:
        """Persist a new order; the store assigns its id."""
        saved = self.data_store.orders.insert(order.model_copy(update={"id": None}))
        logger.info(f"Order {saved.id} saved")
        return saved

    def save(self, order: Order) -> Order:
        """Overwrite the whole aggregate by id."""
        return self.data_store.orders.save(order)

    def find_by_id(self, order_id: str) -> Order:
        """
        Raises:
            OrderNotFoundError: If no order has this id
        """
        order = self.data_store.orders.find_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def find_page(self, page_number: int, page_size: int) -> Page[Order]:
        return self.data_store.orders.find_page(page_number, page_size)
