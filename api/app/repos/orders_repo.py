"""Repository interface for order operations."""

from abc import ABC, abstractmethod


class OrdersRepo(ABC):
    """Contract for storing, removing and querying orders.

    The HTTP layer depends only on this interface so a test double or a
    persistent backend can replace the in-memory store.
    """

    @abstractmethod
    def put(self, order_id, order_input):
        """Create order ``order_id`` from ``order_input`` and return it.

        Raises :class:`~api.app.domain.DuplicateOrderError` if the id is live.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, order_id):
        """Remove order ``order_id`` and return the removed record.

        Raises :class:`~api.app.domain.OrderNotFoundError` if the id is unknown.
        """
        raise NotImplementedError

    @abstractmethod
    def list(self, table_id=None, item_id=None):
        """Return orders matching the optional ``table_id``/``item_id`` filters."""
        raise NotImplementedError
