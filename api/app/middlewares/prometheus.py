"""Prometheus middleware for HTTP request metrics."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..routes_metrics import http_errors_total, http_requests_total


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Increment HTTP request and error counters."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        route = request.scope.get("route")
        # label by route template so ids in the path do not explode cardinality
        path = route.path if route else "unmatched"
        http_requests_total.labels(
            path=path,
            method=request.method,
            status=str(response.status_code),
        ).inc()
        if 400 <= response.status_code < 600:
            http_errors_total.labels(status=str(response.status_code)).inc()
        return response
