"""
API models for the order service.

Requests are validated here, before the service makes any catalog call.
Responses are flat views of the Order aggregate.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from ordering.builder import RequestedLine
from shared.models import Customer, Order, OrderStatus


class CustomerRequest(Customer):
    """Customer block of a create-order request (full name, address, email)."""


class OrderItemRequest(BaseModel):
    product_id: str = Field(..., min_length=1, description="Catalog menu item id")
    quantity: int = Field(..., ge=1)

    def to_requested_line(self) -> RequestedLine:
        return RequestedLine(product_id=self.product_id, quantity=self.quantity)


class CreateOrderRequest(BaseModel):
    """
    Request to place an order.

    Only product ids and quantities are accepted from the client; names
    and prices always come from the catalog.
    """
    customer: CustomerRequest
    order_items: list[OrderItemRequest] = Field(
        ..., min_length=1, description="Order must have at least one item"
    )


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatus


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    quantity: int
    price: Decimal


class OrderResponse(BaseModel):
    id: str
    customer: Customer
    order_items: list[OrderItemResponse]
    total_amount: Decimal
    status: OrderStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            customer=order.customer,
            order_items=[
                OrderItemResponse(
                    product_id=item.product_id,
                    name=item.name,
                    quantity=item.quantity,
                    price=item.unit_price,
                )
                for item in order.line_items
            ],
            total_amount=order.total_amount,
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class UpdateOrderStatusResponse(BaseModel):
    id: str
    status: OrderStatus
    updated_at: datetime


class OrderHistoryResponse(BaseModel):
    orders: list[OrderResponse] = Field(default_factory=list)
    limit: int
    offset: int
    total_records: int
