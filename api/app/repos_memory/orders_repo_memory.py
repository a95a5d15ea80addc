"""Thread-safe in-memory order store.

Orders are kept in a primary mapping keyed by ``order_id`` plus a secondary
index from ``table_id`` to the ids of the orders at that table, so
table-scoped queries touch only that table's orders. Both mappings sit behind
one :class:`~api.app.utils.rwlock.RWLock`: queries share the lock, ``put``
and ``delete`` hold it exclusively across the check and every mutation, so a
reader never sees an order in one mapping but not the other.
"""

from __future__ import annotations

import logging
import random
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Set

from ..domain import (
    COOKING_TIME_MAX,
    COOKING_TIME_MIN,
    DuplicateOrderError,
    Order,
    OrderInput,
    OrderNotFoundError,
    StoreInternalError,
)
from ..repos.orders_repo import OrdersRepo
from ..utils.rwlock import LockPoisonedError, RWLock

logger = logging.getLogger("api.orders")


class InMemoryOrdersRepo(OrdersRepo):
    """Store orders in process memory.

    ``rng`` supplies cooking times; pass a seeded :class:`random.Random` for
    deterministic tests.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()
        self._lock = RWLock()
        self._by_id: Dict[str, Order] = {}
        self._by_table: Dict[str, Set[str]] = {}

    @contextmanager
    def _reading(self) -> Iterator[None]:
        try:
            self._lock.acquire_read()
        except LockPoisonedError as exc:
            raise StoreInternalError("Failed to obtain read lock") from exc
        try:
            yield
        finally:
            self._lock.release_read()

    @contextmanager
    def _writing(self) -> Iterator[None]:
        try:
            with self._lock.write():
                yield
        except LockPoisonedError as exc:
            raise StoreInternalError("Failed to obtain write lock") from exc

    def _cooking_time(self) -> int:
        return self._rng.randint(COOKING_TIME_MIN, COOKING_TIME_MAX)

    def put(self, order_id: str, order_input: OrderInput) -> Order:
        with self._writing():
            duplicate = order_id in self._by_id
            if not duplicate:
                order = Order(
                    order_id=order_id,
                    item_id=order_input.item_id,
                    table_id=order_input.table_id,
                    cooking_time=self._cooking_time(),
                )
                self._by_id[order_id] = order
                self._by_table.setdefault(order.table_id, set()).add(order_id)
        # raised outside the write block so the lock is not poisoned
        if duplicate:
            logger.info("duplicate order %s rejected", order_id)
            raise DuplicateOrderError(order_id)
        logger.debug("order %s placed at table %s", order_id, order.table_id)
        return order

    def delete(self, order_id: str) -> Order:
        with self._writing():
            order = self._by_id.pop(order_id, None)
            if order is not None:
                ids = self._by_table[order.table_id]
                ids.discard(order_id)
                if not ids:
                    del self._by_table[order.table_id]
        if order is None:
            logger.info("delete of unknown order %s rejected", order_id)
            raise OrderNotFoundError(order_id)
        logger.debug("order %s removed from table %s", order_id, order.table_id)
        return order

    def list(
        self, table_id: Optional[str] = None, item_id: Optional[str] = None
    ) -> List[Order]:
        with self._reading():
            if table_id is None:
                orders = list(self._by_id.values())
            else:
                ids = self._by_table.get(table_id, ())
                orders = [self._by_id[oid] for oid in ids]
        if item_id is not None:
            orders = [o for o in orders if o.item_id == item_id]
        return orders

    def get(self, order_id: str) -> Order:
        """Return the live order ``order_id`` or raise ``OrderNotFoundError``."""
        with self._reading():
            order = self._by_id.get(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def __len__(self) -> int:
        with self._reading():
            return len(self._by_id)

    def check_invariants(self) -> None:
        """Raise ``AssertionError`` if the two mappings disagree."""

        with self._reading():
            indexed: Set[str] = set()
            for table_id, ids in self._by_table.items():
                assert ids, f"empty index entry for table {table_id!r}"
                for oid in ids:
                    order = self._by_id.get(oid)
                    assert order is not None, f"index lists dead order {oid!r}"
                    assert (
                        order.table_id == table_id
                    ), f"order {oid!r} indexed under wrong table {table_id!r}"
                    indexed.add(oid)
            for oid, order in self._by_id.items():
                assert order.order_id == oid, f"order keyed under {oid!r}"
                assert oid in indexed, f"order {oid!r} missing from table index"
                assert (
                    COOKING_TIME_MIN <= order.cooking_time <= COOKING_TIME_MAX
                ), f"order {oid!r} cooking time out of range"
