"""
Exception handlers rendering the error envelope.

Dependencies: fastapi, specwright.core.exceptions
System role: Maps exceptions to HTTP responses
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from specwright.core.exceptions import SpecwrightException, is_timeout_error
from specwright.models.common import ErrorBody, ErrorResponse
from specwright.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    body = ErrorResponse(error=ErrorBody(code=code, message=message, details=details or None))
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body, exclude_none=True))


async def specwright_exception_handler(request: Request, exc: SpecwrightException) -> JSONResponse:
    log_level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    logger.log(
        log_level,
        "Request failed",
        extra={"path": request.url.path, "code": exc.code, "error_message": exc.message},
    )
    return error_response(exc.status_code, exc.code, exc.message, exc.details)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return error_response(400, "VALIDATION_ERROR", "Invalid request", {"errors": errors})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if is_timeout_error(exc):
        logger.warning("Upstream timeout", extra={"path": request.url.path, "error_type": type(exc).__name__})
        return error_response(504, "GATEWAY_TIMEOUT", "The model provider did not respond in time")

    log_exception_with_context(logger, "Unhandled exception", exc, path=request.url.path)
    return error_response(500, "INTERNAL_ERROR", "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach envelope handlers to an application."""
    app.add_exception_handler(SpecwrightException, specwright_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
