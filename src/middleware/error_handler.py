"""Exception handlers: domain errors to HTTP responses."""

import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.core.exceptions import (
    DesaServiceError, InvalidArgumentError, NotFoundError,
    InvalidTransitionError, ConflictError
)
from src.schemas.shared import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

STATUS_CODES = {
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    ConflictError: status.HTTP_409_CONFLICT,
}


def get_status_code(exc: DesaServiceError) -> int:
    for exc_class in type(exc).__mro__:
        if exc_class in STATUS_CODES:
            return STATUS_CODES[exc_class]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def desa_service_error_handler(request: Request, exc: DesaServiceError) -> JSONResponse:
    """Handle domain errors raised by services."""
    status_code = get_status_code(exc)
    if status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return _error_response(status_code, exc.code, exc.message, exc.details)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: log with traceback, never leak internals."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "Terjadi kesalahan pada server"
    )


def add_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(DesaServiceError, desa_service_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
