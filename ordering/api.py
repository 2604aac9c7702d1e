"""
FastAPI application for the order service.

Run with:
    uv run uvicorn ordering.api:app --port 8000

Requires the catalog service at CATALOG_SERVICE_URL (default
http://localhost:8001) for order creation.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, status

from ordering.schemas import (
    CreateOrderRequest,
    OrderHistoryResponse,
    OrderResponse,
    UpdateOrderStatusRequest,
    UpdateOrderStatusResponse,
)
from ordering.service import OrderService
from shared.config import get_settings
from shared.web import configure_logging, install_error_handlers

configure_logging(get_settings().log_level)
logger = logging.getLogger("order_api")

# Module-level instance (reset_api_state swaps it in tests)
_service: Optional[OrderService] = None


def get_order_service() -> OrderService:
    global _service
    if _service is None:
        _service = OrderService()
    return _service


def reset_api_state(service: Optional[OrderService] = None) -> None:
    """Reset API state (for testing)."""
    global _service
    _service = service


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting order service (catalog at {get_settings().catalog_service_url})")
    yield
    logger.info("Shutting down")
    if _service is not None:
        _service.close()


app = FastAPI(
    title="Order Service",
    description="Places orders against the catalog and publishes status changes",
    version="1.0.0",
    lifespan=lifespan,
)
install_error_handlers(app)


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "order-service"}


@app.post("/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    request: CreateOrderRequest,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return service.create_order(request)


@app.patch("/orders/{order_id}/status", response_model=UpdateOrderStatusResponse)
def update_order_status(
    order_id: str,
    request: UpdateOrderStatusRequest,
    service: OrderService = Depends(get_order_service),
) -> UpdateOrderStatusResponse:
    return service.update_order_status(order_id, request)


@app.get("/orders", response_model=OrderHistoryResponse)
def get_order_history(
    limit: int = Query(default=10, ge=1),
    offset: int = Query(default=0, ge=0),
    service: OrderService = Depends(get_order_service),
) -> OrderHistoryResponse:
    return service.get_order_history(limit, offset)


@app.get("/orders/{order_id}", response_model=OrderResponse)
def get_order_by_id(
    order_id: str,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return service.get_order_by_id(order_id)
