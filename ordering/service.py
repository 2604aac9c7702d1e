"""
Order service: the four use cases behind the /orders API.

    create   -> OrderBuilder (catalog lookups) -> OrderStore.insert
    update   -> OrderStatusUpdater (save, then publish)
    list     -> paginate over OrderStore.find_page
    get      -> OrderStore.find_by_id

Collaborators are passed in, falling back to process-wide defaults, so
tests can swap any of them for a fake.
"""

import logging
from typing import Optional

from ordering.builder import MenuItemResolver, OrderBuilder
from ordering.catalog_gateway import CatalogGateway
from ordering.messaging import OrderStatusPublisher
from ordering.schemas import (
    CreateOrderRequest,
    OrderHistoryResponse,
    OrderResponse,
    UpdateOrderStatusRequest,
    UpdateOrderStatusResponse,
)
from ordering.status import OrderStatusUpdater
from ordering.store import OrderStore
from shared.models import Customer
from shared.pagination import paginate

logger = logging.getLogger("order_service")


class OrderService:
    """
    Facade over the order workflow.

    Example:
        service = OrderService(catalog=gateway, order_store=OrderStore(data_store))
        created = service.create_order(request)
        service.update_order_status(created.id, UpdateOrderStatusRequest(status="PREPARING"))
    """

    def __init__(
        self,
        catalog: Optional[MenuItemResolver] = None,
        order_store: Optional[OrderStore] = None,
        publisher: Optional[OrderStatusPublisher] = None,
        builder: Optional[OrderBuilder] = None,
        status_updater: Optional[OrderStatusUpdater] = None,
    ):
        self.order_store = order_store or OrderStore()
        self.builder = builder or OrderBuilder(catalog or CatalogGateway.from_settings())
        self.status_updater = status_updater or OrderStatusUpdater(
            self.order_store, publisher or OrderStatusPublisher(),
        )

    def close(self) -> None:
        """Release the catalog client, if the resolver holds one."""
        close = getattr(self.builder.resolver, "close", None)
        if close is not None:
            close()

    def create_order(self, request: CreateOrderRequest) -> OrderResponse:
        """
        Raises:
            ValidationFailure, MenuItemNotFoundError, CatalogUnavailableError:
                Nothing is persisted in any of these cases
        """
        customer = Customer(**request.customer.model_dump())
        order = self.builder.build(
            customer,
            [item.to_requested_line() for item in request.order_items],
        )
        saved = self.order_store.insert(order)
        logger.info(
            f"Order {saved.id} created for {customer.email}: "
            f"{len(saved.line_items)} items, total {saved.total_amount}"
        )
        return OrderResponse.from_order(saved)

    def update_order_status(
        self, order_id: str, request: UpdateOrderStatusRequest
    ) -> UpdateOrderStatusResponse:
        updated = self.status_updater.apply_status(order_id, request.status)
        return UpdateOrderStatusResponse(
            id=updated.id,
            status=updated.status,
            updated_at=updated.updated_at,
        )

    def get_order_history(self, limit: int = 10, offset: int = 0) -> OrderHistoryResponse:
        window = paginate(self.order_store.find_page, limit, offset)
        return OrderHistoryResponse(
            orders=[OrderResponse.from_order(order) for order in window.items],
            limit=limit,
            offset=offset,
            total_records=window.total,
        )

    def get_order_by_id(self, order_id: str) -> OrderResponse:
        return OrderResponse.from_order(self.order_store.find_by_id(order_id))
