# main.py

"""FastAPI application exposing the in-memory order store."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings

from .domain import OrderStoreError
from .middlewares import LoggingMiddleware, PrometheusMiddleware, RequestIdMiddleware
from .obs import configure_logging, init_sentry
from .repos.orders_repo import OrdersRepo
from .repos_memory import InMemoryOrdersRepo
from .routes_metrics import router as metrics_router
from .routes_orders import router as orders_router
from .routes_version import router as version_router
from .utils.responses import error_response, ok

logger = logging.getLogger("api")


def _error_field(error: dict) -> str:
    """Return the dotted field path of a validation error, or ``body``."""

    loc = [part for part in error.get("loc", ())[1:] if isinstance(part, str)]
    return ".".join(loc) or "body"


def create_app(
    repo: OrdersRepo | None = None, settings: Settings | None = None
) -> FastAPI:
    """Build the application around ``repo`` (a fresh in-memory store by default)."""

    settings = settings or get_settings()
    app = FastAPI(
        title="Order Tracking API",
        version="1.0.0",
        servers=[{"url": "/"}],
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.orders_repo = repo if repo is not None else InMemoryOrdersRepo()

    # last added runs first: request id must be set before the access log
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(LoggingMiddleware, sample_2xx=settings.log_sample_2xx)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(orders_router)
    app.include_router(version_router)
    app.include_router(metrics_router)

    @app.get("/health")
    async def health() -> dict:
        return ok({"status": "ok"})

    @app.exception_handler(OrderStoreError)
    async def order_store_error_handler(request: Request, exc: OrderStoreError):
        if exc.status_code >= 500:
            logger.error(
                "%s",
                exc.message,
                exc_info=exc,
                extra={"route": request.url.path, "status": 500},
            )
            return error_response(500, exc.error_code, "Internal Server Error")
        return error_response(exc.status_code, exc.error_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields = ", ".join(sorted({_error_field(e) for e in exc.errors()}))
        logger.info(
            "invalid body: %s",
            fields,
            extra={"route": request.url.path, "status": 400},
        )
        return error_response(400, "INVALID_BODY", f"Invalid request body: {fields}")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        status = exc.status_code
        # a method mismatch on a known path is reported as an unknown route
        if status == 405:
            status = 404
        code = "NOT_FOUND" if status == 404 else "HTTP_ERROR"
        detail = "Not Found" if status == 404 else str(exc.detail)
        return error_response(status, code, detail)

    return app


_settings = get_settings()
configure_logging(getattr(logging, _settings.log_level.upper(), logging.INFO))
init_sentry(_settings.error_dsn, env=_settings.app_env)
app = create_app(settings=_settings)
