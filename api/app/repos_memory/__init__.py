"""In-memory repository implementations."""

from .orders_repo_memory import InMemoryOrdersRepo

__all__ = ["InMemoryOrdersRepo"]
