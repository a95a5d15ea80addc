# routes_metrics.py

"""Prometheus metrics and /metrics endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, generate_latest

# Counters
http_requests_total = Counter(
    "http_requests_total", "Total HTTP requests", ["path", "method", "status"]
)

http_errors_total = Counter("http_errors_total", "Total HTTP errors", ["status"])
http_errors_total.labels(status="0").inc(0)

orders_created_total = Counter("orders_created_total", "Total orders created")
orders_created_total.inc(0)

orders_deleted_total = Counter("orders_deleted_total", "Total orders deleted")
orders_deleted_total.inc(0)

order_conflicts_total = Counter(
    "order_conflicts_total", "Total order creations rejected as duplicates"
)
order_conflicts_total.inc(0)

orders_live = Gauge("orders_live", "Orders currently held in the store")
orders_live.set(0)

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def metrics_endpoint() -> Response:
    """Expose Prometheus metrics."""
    data = generate_latest()
    return Response(data, media_type=CONTENT_TYPE_LATEST)
