"""
Order service.

Builds orders from catalog data (with retry and circuit breaking around
the catalog call), stores them, pages through them, and publishes an
event every time an order's status changes.
"""

from ordering.builder import OrderBuilder, RequestedLine
from ordering.catalog_gateway import CatalogGateway
from ordering.messaging import Event, EventBus, OrderStatusPublisher, get_event_bus, reset_event_bus
from ordering.resilience import CircuitBreaker, CircuitOpenError, CircuitState, RetryPolicy
from ordering.service import OrderService
from ordering.status import OrderStatusUpdater
from ordering.store import OrderStore

__all__ = [
    "OrderBuilder",
    "RequestedLine",
    "CatalogGateway",
    "Event",
    "EventBus",
    "OrderStatusPublisher",
    "get_event_bus",
    "reset_event_bus",
    "CircuitBreaker",
    "CircuitOpenError",
    "CircuitState",
    "RetryPolicy",
    "OrderService",
    "OrderStatusUpdater",
    "OrderStore",
]
