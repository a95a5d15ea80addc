"""Error kinds raised by order stores."""

from __future__ import annotations


class OrderStoreError(Exception):
    """Base class for store failures with a stable ``error_code``."""

    error_code = "INTERNAL"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DuplicateOrderError(OrderStoreError):
    """Raised when ``put`` targets an id that is already live."""

    error_code = "DUPLICATE_ORDER"
    status_code = 409

    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order with id '{order_id}' already exists.")
        self.order_id = order_id


class OrderNotFoundError(OrderStoreError):
    """Raised when an operation names an id that is not live."""

    error_code = "ORDER_NOT_FOUND"
    status_code = 404

    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order with id '{order_id}' not found.")
        self.order_id = order_id


class StoreInternalError(OrderStoreError):
    """Raised when the store's lock is poisoned or otherwise unusable."""
