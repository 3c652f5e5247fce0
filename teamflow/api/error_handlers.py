# teamflow/api/error_handlers.py
"""Exception handlers rendering every failure in the response envelope.

Domain errors carry their own status and code. Unexpected errors are logged
with a traceback and reported as a generic 500.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from teamflow.core.errors import DomainError
from teamflow.schemas.common import error_body

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHENTICATED",
    403: "INVALID_PERMISSION",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.info(
        "Domain error: %s (code=%s, status=%d, path=%s)",
        exc.message,
        exc.error_code,
        exc.status_code,
        request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.error_code, exc.message),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(x) for x in error.get("loc", ()))
        parts.append(f"{loc}: {error.get('msg', 'Invalid value')}")
    message = "; ".join(parts) or "Request validation failed"

    logger.info("Validation error: %s (path=%s)", message, request.url.path)
    return JSONResponse(status_code=400, content=error_body(400, "VALIDATION_ERROR", message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_ERROR_CODES.get(exc.status_code, "ERROR")
    message = str(exc.detail) if exc.detail else "An error occurred"
    logger.info("HTTP error %d: %s (path=%s)", exc.status_code, message, request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, code, message),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception (path=%s)", request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_body(500, "INTERNAL_SERVER_ERROR", "An unexpected error occurred"),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
