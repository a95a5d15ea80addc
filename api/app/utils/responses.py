from typing import Any, Dict

from fastapi.responses import JSONResponse


def ok(data: Any) -> Dict[str, Any]:
    """Return a success envelope."""
    return {"ok": True, "data": data}


def err(error_code: str, message: str) -> Dict[str, Any]:
    """Return an error body carrying a stable ``error_code``."""
    from ..middlewares.request_id import request_id_ctx

    return {
        "error_code": error_code,
        "message": message,
        "request_id": request_id_ctx.get(None),
    }


def error_response(status_code: int, error_code: str, message: str) -> JSONResponse:
    """Return ``err`` wrapped in a ``JSONResponse``."""
    return JSONResponse(err(error_code, message), status_code=status_code)
