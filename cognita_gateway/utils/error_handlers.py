"""
Error Handler Utilities

Converts exceptions into the gateway's JSON error bodies. Every error
response carries an ``error`` string; request validation failures also carry
``details``.

Usage:
    from cognita_gateway.utils.error_handlers import register_exception_handlers

    # In main.py
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from cognita_gateway.schemas.chat import (
    INVALID_BODY_MESSAGE,
    ChatRequestValidationError,
    flatten_validation_errors,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    content = detail if isinstance(detail, dict) and "error" in detail else {"error": str(detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


async def chat_validation_exception_handler(
    request: Request, exc: ChatRequestValidationError
) -> JSONResponse:
    logger.info(f"Rejected invalid request body on {request.url.path}")
    return JSONResponse(
        status_code=400,
        content={"error": exc.message, "details": exc.details},
    )


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": INVALID_BODY_MESSAGE,
            "details": flatten_validation_errors(list(exc.errors())),
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected exceptions with traceback and hide their details from the client."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(ChatRequestValidationError, chat_validation_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
