"""
Error handling for the HTTP layer.

- TodoServiceError -> its own status and {"error", "message"} body
- RequestValidationError -> 400 with field-level details
- anything else -> generic 500 from an HTTP middleware, details only in the log
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .errors import TodoServiceError

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def register_error_handlers(app: FastAPI) -> None:
    """Attach the exception handlers and the catch-all middleware to the app."""
    app.add_exception_handler(TodoServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.middleware("http")(catch_unhandled_exceptions)


async def catch_unhandled_exceptions(request: Request, call_next):
    """Turn anything the routes did not handle into a generic 500."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception(
            f"Unhandled exception on {request.method} {request.url.path}",
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "InternalServerError", "message": "An unexpected error occurred"},
        )


async def service_error_handler(request: Request, exc: TodoServiceError) -> JSONResponse:
    logger.error(f"{exc.code}: {exc.message}", extra={"path": request.url.path})
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": [{"field": ..., "message": ..., "type": ...}, ...]
        }
    """
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    )
