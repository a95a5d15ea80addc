"""Domain models and helpers."""

from .errors import (
    DuplicateOrderError,
    OrderNotFoundError,
    OrderStoreError,
    StoreInternalError,
)
from .order import COOKING_TIME_MAX, COOKING_TIME_MIN, Order, OrderInput

__all__ = [
    "COOKING_TIME_MAX",
    "COOKING_TIME_MIN",
    "DuplicateOrderError",
    "Order",
    "OrderInput",
    "OrderNotFoundError",
    "OrderStoreError",
    "StoreInternalError",
]
