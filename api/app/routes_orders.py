from __future__ import annotations

"""Order endpoints: create, delete and query orders held by the store.

Handlers are plain ``def`` so FastAPI runs them in its thread pool; the store
blocks on its lock and must not stall the event loop.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from .domain import DuplicateOrderError, Order, OrderInput
from .repos.orders_repo import OrdersRepo
from .routes_metrics import (
    order_conflicts_total,
    orders_created_total,
    orders_deleted_total,
    orders_live,
)
from .utils.responses import error_response

router = APIRouter(tags=["Orders"])


def get_orders_repo(request: Request) -> OrdersRepo:
    """Return the store attached to the running application."""

    return request.app.state.orders_repo


def require_json_body(request: Request) -> None:
    """Fail route resolution with 404 when the body is declared as non-JSON.

    Requests without a ``Content-Type`` header are parsed as JSON.
    """

    content_type = request.headers.get("content-type")
    if content_type is None:
        return
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != "application/json" and not media_type.endswith("+json"):
        raise HTTPException(status_code=404, detail="Not Found")


@router.put(
    "/order/{order_id}",
    response_model=Order,
    summary="Create order",
    dependencies=[Depends(require_json_body)],
)
def put_order(
    order_id: str,
    payload: OrderInput,
    request: Request,
    repo: OrdersRepo = Depends(get_orders_repo),
):
    """Create ``order_id`` for ``payload.item_id`` at ``payload.table_id``.

    The store assigns the cooking time.
    """

    if request.app.state.settings.reject_empty_ids and not (
        payload.item_id and payload.table_id
    ):
        return error_response(400, "INVALID_BODY", "item_id and table_id must be non-empty")
    try:
        order = repo.put(order_id, payload)
    except DuplicateOrderError:
        order_conflicts_total.inc()
        raise
    orders_created_total.inc()
    orders_live.inc()
    return order


@router.delete("/order/{order_id}", response_model=Order, summary="Delete order")
def delete_order(order_id: str, repo: OrdersRepo = Depends(get_orders_repo)):
    """Remove ``order_id`` and return the removed record."""

    order = repo.delete(order_id)
    orders_deleted_total.inc()
    orders_live.dec()
    return order


@router.get("/orders", response_model=List[Order], summary="List orders")
def list_orders(
    table_id: Optional[str] = None,
    item_id: Optional[str] = None,
    repo: OrdersRepo = Depends(get_orders_repo),
):
    """Return orders, optionally filtered by table and/or item."""

    return repo.list(table_id=table_id, item_id=item_id)
