"""
In-process walkthrough of the order lifecycle.

Runs the catalog app and the order service in one process: the catalog
gateway talks to the catalog app through a TestClient (an httpx.Client),
so the real HTTP path, retry policy and circuit breaker are all exercised
without opening sockets.
"""

import logging
from decimal import Decimal

from fastapi.testclient import TestClient

from catalog import api as catalog_api
from catalog.models import CreateMenuItemRequest
from catalog.service import MenuItemService
from ordering.catalog_gateway import CatalogGateway
from ordering.messaging import Event, OrderStatusPublisher, reset_event_bus
from ordering.schemas import CreateOrderRequest, UpdateOrderStatusRequest
from ordering.service import OrderService
from ordering.store import OrderStore
from shared.data_store import DataStore
from shared.exceptions import NotFoundError
from shared.models import OrderStatus
from shared.web import configure_logging

logger = logging.getLogger("demo")


def run_order_lifecycle_demo() -> None:
    """
    Create a couple of menu items, place an order, move it through a few
    statuses, and page through the order history.
    """
    configure_logging()
    print("\n" + "=" * 70)
    print("DEMO: Order lifecycle")
    print("=" * 70 + "\n")

    data_store = DataStore()
    menu = MenuItemService(data_store)
    burger = menu.create_menu_item(CreateMenuItemRequest(name="Classic Burger", price=Decimal("12.90")))
    fries = menu.create_menu_item(CreateMenuItemRequest(name="Fries", price=Decimal("5.50")))

    catalog_api.reset_api_state(menu)
    event_bus = reset_event_bus()
    received: list[Event] = []
    event_bus.subscribe("OrderStatusChanged", received.append)

    with TestClient(catalog_api.app) as catalog_client:
        service = OrderService(
            catalog=CatalogGateway(catalog_client),
            order_store=OrderStore(data_store),
            publisher=OrderStatusPublisher(event_bus),
        )

        order = service.create_order(CreateOrderRequest(
            customer={"full_name": "John Doe", "address": "123 Main St", "email": "john@email.com"},
            order_items=[
                {"product_id": burger.id, "quantity": 2},
                {"product_id": fries.id, "quantity": 3},
            ],
        ))
        print(f"\nCreated order {order.id}: total {order.total_amount}")

        for new_status in (OrderStatus.PREPARING, OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED):
            service.update_order_status(order.id, UpdateOrderStatusRequest(status=new_status))

        try:
            service.create_order(CreateOrderRequest(
                customer={"full_name": "Jane Roe", "address": "9 Side St", "email": "jane@email.com"},
                order_items=[{"product_id": "does-not-exist", "quantity": 1}],
            ))
        except NotFoundError as e:
            print(f"\nRejected order with unknown item: {e}")

    history = service.get_order_history(limit=10, offset=0)
    print(f"\nOrders on file: {history.total_records}")
    print(f"Status events published: {len(received)}")
    for event in received:
        print(f"  {event.payload['order_id'][:8]} -> {event.payload['status']}")

    catalog_api.reset_api_state(None)
