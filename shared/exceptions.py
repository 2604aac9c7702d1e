"""
Error taxonomy shared by the catalog and order services.

Callers need to tell three situations apart:
- NotFoundError: the thing definitively does not exist (HTTP 404)
- ServiceUnavailableError: a dependency is degraded, we cannot currently tell (HTTP 503)
- ValidationFailure: the input was malformed and was rejected before any external call (HTTP 422)

Anything that is not a ServiceError is treated as an unexpected server fault.
"""


class ServiceError(Exception):
    """Base class for every error the services raise on purpose."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    """A requested entity does not exist. A business outcome, not a fault."""

    status_code = 404


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str):
        super().__init__(f"Order not found with id: {order_id}")
        self.order_id = order_id


class MenuItemNotFoundError(NotFoundError):
    def __init__(self, menu_item_id: str):
        super().__init__(f"Menu Item not found with id: {menu_item_id}")
        self.menu_item_id = menu_item_id


class ServiceUnavailableError(ServiceError):
    """A downstream dependency could not be reached."""

    status_code = 503


class CatalogUnavailableError(ServiceUnavailableError):
    def __init__(
        self,
        message: str = "Menu Service is currently unavailable. Please try again later.",
    ):
        super().__init__(message)


class ValidationFailure(ServiceError):
    """Input rejected before any side effect or external call."""

    status_code = 422
