"""
Turns a create-order request into a priced Order aggregate.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Protocol, Sequence

from shared.exceptions import ValidationFailure
from shared.models import Customer, MenuItem, Order, OrderLineItem, OrderStatus, utcnow

logger = logging.getLogger("order_builder")


class MenuItemResolver(Protocol):
    def resolve(self, product_id: str) -> MenuItem: ...


@dataclass(frozen=True)
class RequestedLine:
    """One line of a create-order request before it is priced."""
    product_id: str
    quantity: int


class OrderBuilder:
    """
    Builds unsaved orders, resolving every line against the catalog.

    Creation is all-or-nothing: the first line that fails to resolve
    aborts the build, and the caller never gets to persist anything.
    """

    def __init__(self, resolver: MenuItemResolver, clock: Callable[[], datetime] = utcnow):
        self.resolver = resolver
        self._clock = clock

    def build(self, customer: Customer, requested_lines: Sequence[RequestedLine]) -> Order:
        """
        Raises:
            ValidationFailure: No lines, or a quantity below 1
            MenuItemNotFoundError / CatalogUnavailableError: From the resolver
        """
        if not requested_lines:
            raise ValidationFailure("Order must have at least one item")
        for line in requested_lines:
            if line.quantity < 1:
                raise ValidationFailure(f"Quantity for {line.product_id} must be at least 1")

        line_items = []
        for line in requested_lines:
            menu_item = self.resolver.resolve(line.product_id)
            line_items.append(OrderLineItem(
                product_id=menu_item.id or line.product_id,
                name=menu_item.name,
                quantity=line.quantity,
                unit_price=menu_item.price,
            ))

        total_amount = Order.compute_total(line_items)
        logger.debug(f"Built order for {customer.email}: {len(line_items)} lines, total {total_amount}")

        return Order(
            customer=customer,
            line_items=line_items,
            total_amount=total_amount,
            status=OrderStatus.CREATED,
            created_at=self._clock(),
            updated_at=None,
        )
