"""
Message channel for order status notifications.

The order service announces every status change on an event bus. Whoever
cares (a notifier, an audit log, a projection) subscribes; the order
service does not know who is listening.

This is an in-process bus. In production it would be a broker exchange
(RabbitMQ, SNS, ...); the publisher below is the only thing that would
change.

Design decisions:
- Synchronous delivery in subscription order
- Type-based subscriptions, plus "*" for everything
- A failing subscriber is logged and skipped; it never reaches the publisher
- Delivery is at-most-once: nothing is stored or redelivered
"""

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional
from uuid import uuid4

from shared.models import OrderStatusEvent, utcnow

logger = logging.getLogger("event_bus")

ORDER_STATUS_CHANGED = "OrderStatusChanged"
ORDER_SERVICE = "order-service"


@dataclass
class Event:
    """
    Envelope for anything published on the bus.

    Attributes:
        event_type: Routing key (e.g. "OrderStatusChanged")
        payload: JSON-ready event body
        source: Publishing service
        event_id: Unique id of this envelope
        timestamp: When it was published
    """
    event_type: str
    payload: dict[str, Any]
    source: str
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=utcnow)

    def __str__(self) -> str:
        return f"Event({self.event_type}, id={self.event_id[:8]}, source={self.source})"


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Simple in-memory pub/sub.

    Example usage:
        bus = EventBus()
        bus.subscribe("OrderStatusChanged", lambda event: print(event.payload))
        bus.publish(Event(
            event_type="OrderStatusChanged",
            source="order-service",
            payload={"order_id": "abc", "status": "PREPARING"},
        ))
    """

    def __init__(self):
        self._subscribers: dict[str, list[EventHandler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        with self._lock:
            self._subscribers[event_type].append(handler)
        logger.debug(f"Subscribed handler to '{event_type}' events")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to every event type (audit, debugging)."""
        self.subscribe("*", handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> bool:
        """
        Returns:
            True if the handler was found and removed, False otherwise
        """
        with self._lock:
            try:
                self._subscribers[event_type].remove(handler)
                return True
            except ValueError:
                return False

    def publish(self, event: Event) -> int:
        """
        Deliver an event to every matching subscriber.

        Returns:
            Number of handlers that were called
        """
        with self._lock:
            handlers = list(self._subscribers.get(event.event_type, []))
            handlers += self._subscribers.get("*", [])

        logger.info(f"Publishing: {event}")

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Handler raised exception for {event}: {e}")

        if not handlers:
            logger.warning(f"No handlers for event type '{event.event_type}'")

        return len(handlers)

    def get_subscriber_count(self, event_type: str) -> int:
        with self._lock:
            return len(self._subscribers.get(event_type, []))

    def clear_subscribers(self) -> None:
        with self._lock:
            self._subscribers.clear()


class OrderStatusPublisher:
    """Publishes OrderStatusEvents on the bus."""

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus or get_event_bus()

    def publish_order_status_change(self, status_event: OrderStatusEvent) -> None:
        logger.info(
            f"Publishing order status change: orderId={status_event.order_id}, "
            f"status={status_event.status.value}"
        )
        self.event_bus.publish(Event(
            event_type=ORDER_STATUS_CHANGED,
            source=ORDER_SERVICE,
            payload=status_event.model_dump(mode="json"),
        ))


# Module-level singleton for convenience
_default_bus: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Get the default event bus singleton."""
    global _default_bus
    if _default_bus is None:
        _default_bus = EventBus()
    return _default_bus


def reset_event_bus() -> EventBus:
    """Reset the default event bus (useful for testing)."""
    global _default_bus
    _default_bus = EventBus()
    return _default_bus
