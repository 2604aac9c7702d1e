"""
Order status transitions and their notifications.

A transition is two independent steps:
1. persist the new status (the part that must succeed)
2. announce it on the message channel (best effort)

If step 2 fails the status change stays persisted and the caller still
gets a success. The failure is only logged. Making the two atomic would
need an outbox table, which this service does not have.
"""

import logging
from datetime import datetime
from typing import Callable

from ordering.messaging import OrderStatusPublisher
from ordering.store import OrderStore
from shared.models import Order, OrderStatus, OrderStatusEvent, utcnow

logger = logging.getLogger("order_status")


class OrderStatusUpdater:
    """
    Applies a status to an order, saves it, and notifies subscribers.

    Any status may follow any status; no transition graph is enforced.
    Concurrent updates to the same order are last-write-wins.
    """

    def __init__(
        self,
        order_store: OrderStore,
        publisher: OrderStatusPublisher,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.order_store = order_store
        self.publisher = publisher
        self._clock = clock

    def apply_status(self, order_id: str, new_status: OrderStatus) -> Order:
        """
        Raises:
            OrderNotFoundError: Unknown order id (nothing saved, nothing published)
        """
        new_status = OrderStatus(new_status)
        order = self.order_store.find_by_id(order_id)
        previous_status = order.status

        updated = self.order_store.save(order.model_copy(update={
            "status": new_status,
            "updated_at": self._clock(),
        }))
        logger.info(f"Order {order_id}: {previous_status.value} -> {new_status.value}")

        self._notify(updated)
        return updated

    def _notify(self, order: Order) -> None:
        try:
            self.publisher.publish_order_status_change(OrderStatusEvent.from_order(order))
        except Exception as e:
            # Status is already persisted; delivery is best effort
            logger.error(f"Failed to publish status change for order {order.id}: {e}")
