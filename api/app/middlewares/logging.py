import logging
import random
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..obs.errors import capture_exception
from ..utils.responses import error_response

logger = logging.getLogger("api.access")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Emit one structured access log line per request.

    Successful responses are sampled at ``sample_2xx``; errors are always
    logged. Exceptions that escape the app become a 500 JSON body.
    """

    def __init__(self, app, sample_2xx: float = 1.0) -> None:
        super().__init__(app)
        self.sample_2xx = sample_2xx

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        error_id = None
        try:
            response = await call_next(request)
        except Exception as exc:
            error_id = str(uuid.uuid4())
            capture_exception(exc)
            response = error_response(500, "INTERNAL", "Internal Server Error")
        dur_ms = int((time.perf_counter() - start) * 1000)
        status = response.status_code

        if 200 <= status < 300 and random.random() >= self.sample_2xx:
            return response

        extra = {
            "route": request.url.path,
            "method": request.method,
            "status": status,
            "latency_ms": dur_ms,
        }
        if error_id:
            extra["error_id"] = error_id
        log_fn = logger.error if status >= 500 else logger.info
        log_fn("%s %s -> %s", request.method, request.url.path, status, extra=extra)
        return response
