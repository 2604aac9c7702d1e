"""
Domain models for the restaurant catalog and order services.

Design decisions:
- Using Pydantic for validation and serialization
- Money is Decimal everywhere, never float, so totals do not drift
- Line items snapshot catalog data at order time; later price changes don't touch them
- Timestamps are timezone-aware UTC
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def utcnow() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


# =============================================================================
# Enums
# =============================================================================

class OrderStatus(str, Enum):
    """
    Order lifecycle states.

    No transition graph is enforced: any status may follow any status.
    """
    CREATED = "CREATED"
    PREPARING = "PREPARING"
    READY = "READY"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# =============================================================================
# Catalog
# =============================================================================

class MenuItem(BaseModel):
    """
    A dish on the menu, owned by the catalog service.

    The order service only ever reads it, and copies id/name/price into
    its own line items.
    """
    id: Optional[str] = Field(default=None, description="Assigned by the store on insert")
    name: str = Field(..., min_length=1)
    description: Optional[str] = Field(default=None)
    price: Decimal = Field(..., ge=0)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = Field(default=None)


# =============================================================================
# Orders
# =============================================================================

class Customer(BaseModel):
    """Customer details captured on the order itself."""
    full_name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    email: str = Field(..., pattern=EMAIL_PATTERN)

    @field_validator("full_name", "address")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class OrderLineItem(BaseModel):
    """A snapshot of one catalog item at the time the order was placed."""
    product_id: str
    name: str
    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., ge=0)

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


class Order(BaseModel):
    """
    Order aggregate root.

    Saved and loaded as a unit. total_amount is computed once, at creation,
    and never recomputed when the status changes.
    """
    id: Optional[str] = Field(default=None, description="Assigned by the store on insert")
    customer: Customer
    line_items: list[OrderLineItem] = Field(..., min_length=1)
    total_amount: Decimal = Field(..., ge=0)
    status: OrderStatus = Field(default=OrderStatus.CREATED)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = Field(default=None)

    @staticmethod
    def compute_total(line_items: list[OrderLineItem]) -> Decimal:
        """Exact sum of unit_price * quantity over all line items."""
        return sum((item.subtotal for item in line_items), Decimal("0"))

    @model_validator(mode="after")
    def total_matches_line_items(self) -> "Order":
        expected = self.compute_total(self.line_items)
        if self.total_amount != expected:
            raise ValueError(
                f"total_amount {self.total_amount} does not match line items total {expected}"
            )
        return self


class OrderStatusEvent(BaseModel):
    """
    Fact emitted once per successful status transition.

    Carries a snapshot of the customer so subscribers don't have to
    call back into the order service.
    """
    order_id: str
    full_name: str
    address: str
    email: str
    status: OrderStatus

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_order(cls, order: Order) -> "OrderStatusEvent":
        return cls(
            order_id=order.id,
            full_name=order.customer.full_name,
            address=order.customer.address,
            email=order.customer.email,
            status=order.status,
        )
