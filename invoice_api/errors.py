"""
Error envelope and exception handlers for the HTTP surface.

Every error response has the same shape::

    {"error": {"code": "...", "message": "...", "trace_id": "...", "details": [...]}}

``details`` is only present when there is something to list.  Kernel
exceptions are mapped to statuses by type; routes that need a
route-specific code (invoice create vs. update) raise ``ApiError``.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from invoice_kernel.exceptions import (
    InvalidDateFormatError,
    InvalidTokenError,
    InvoiceKernelError,
    InvoiceNotFoundError,
    LoginFailedError,
    RegistrationFailedError,
    ValidationFailedError,
    ValueObjectError,
)
from invoice_kernel.logging_config import LogContext, get_logger

logger = get_logger("api.errors")

INVALID_DATE_MESSAGE = "Invalid date format. Use YYYY-MM-DD."

# Starlette renamed the 422 constant; the number is stable
UNPROCESSABLE = 422

# Most specific first; the first isinstance match wins
_KERNEL_STATUS: tuple[tuple[type[InvoiceKernelError], int], ...] = (
    (InvalidDateFormatError, status.HTTP_400_BAD_REQUEST),
    (InvoiceNotFoundError, status.HTTP_404_NOT_FOUND),
    (RegistrationFailedError, UNPROCESSABLE),
    (LoginFailedError, status.HTTP_401_UNAUTHORIZED),
    (InvalidTokenError, status.HTTP_401_UNAUTHORIZED),
    (ValidationFailedError, UNPROCESSABLE),
    (ValueObjectError, UNPROCESSABLE),
)


class ApiError(Exception):
    """An error with an explicit status and envelope code."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: list[str] | None = None,
    ):
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)

    @classmethod
    def from_invoice_error(cls, code: str, exc: InvoiceKernelError) -> ApiError:
        details = exc.messages() if isinstance(exc, ValidationFailedError) else None
        return cls(UNPROCESSABLE, code, str(exc), details)


def _trace_id(request: Request) -> str | None:
    return getattr(request.state, "trace_id", None) or LogContext.get("trace_id")


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: list[Any] | None = None,
) -> JSONResponse:
    payload: dict[str, Any] = {
        "code": code,
        "message": message,
        "trace_id": _trace_id(request),
    }
    if details:
        payload["details"] = details
    return JSONResponse(status_code=status_code, content={"error": payload})


def _status_for(exc: InvoiceKernelError) -> int:
    for exc_type, status_code in _KERNEL_STATUS:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    logger.info(
        "request_rejected",
        extra={"code": exc.code, "status": exc.status_code},
    )
    return error_response(request, exc.status_code, exc.code, exc.message, exc.details)


async def handle_kernel_error(request: Request, exc: InvoiceKernelError) -> JSONResponse:
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error("unmapped_kernel_error", exc_info=exc)
        return error_response(
            request, status_code, "INTERNAL_SERVER_ERROR", "An unexpected error occurred"
        )

    message = INVALID_DATE_MESSAGE if isinstance(exc, InvalidDateFormatError) else str(exc)
    details = exc.messages() if isinstance(exc, ValidationFailedError) else None
    logger.info("request_rejected", extra={"code": exc.code, "status": status_code})
    return error_response(request, status_code, exc.code, message, details)


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = [
        f"{'.'.join(str(part) for part in err.get('loc', ()) if part != 'body')} {err.get('msg', '')}".strip()
        for err in exc.errors()
    ]
    return error_response(
        request,
        UNPROCESSABLE,
        "VALIDATION_ERROR",
        "Request validation failed",
        details,
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error("internal_server_error", exc_info=exc)
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(InvoiceKernelError, handle_kernel_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)
