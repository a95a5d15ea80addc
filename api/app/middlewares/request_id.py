import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Context variable used by log filter and error bodies to carry the request id
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

MAX_REQUEST_ID_LEN = 128


def _incoming_id(request: Request) -> str:
    """Return the caller's ``X-Request-ID`` if usable, else a fresh uuid."""
    req_id = request.headers.get("X-Request-ID", "").strip()
    if not req_id or len(req_id) > MAX_REQUEST_ID_LEN or not req_id.isprintable():
        return str(uuid.uuid4())
    return req_id


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Ensure every request and response carries a request id."""

    async def dispatch(self, request: Request, call_next):
        req_id = _incoming_id(request)
        token = request_id_ctx.set(req_id)
        request.state.request_id = req_id
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers["X-Request-ID"] = req_id
        return response
