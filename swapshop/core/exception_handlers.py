"""
Exception handlers - translate domain errors to structured JSON responses.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from swapshop.core.exceptions import InvariantViolation, SwapShopError

logger = logging.getLogger(__name__)


def _request_context(request: Request) -> str:
    client = request.client.host if request.client else "-"
    return f"{request.method} {request.url.path} from {client}"


async def handle_swapshop_error(request: Request, exc: SwapShopError) -> JSONResponse:
    # Invariant violations were already logged at CRITICAL where they were raised
    if not isinstance(exc, InvariantViolation):
        logger.warning(
            "[%s] %s -> %s: %s", type(exc).__name__, _request_context(request), exc.status_code, exc.message
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[Unhandled Error] %s: %s", _request_context(request), exc)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": {"code": "INTERNAL_ERROR", "message": "Internal server error", "details": {}},
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SwapShopError, handle_swapshop_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
