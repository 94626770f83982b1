"""Centralized exception handlers for the FastAPI application.

Domain exceptions are mapped to HTTP responses in one place so every
endpoint answers errors with the same envelope.

Error Response Format:
    {
        "status": "fail" | "error",
        "message": "Human-readable error message"
    }

``status`` is "fail" for 4xx and "error" for 5xx. In development mode the
envelope additionally carries ``error`` (code and details) and ``stack``.

Usage:
    from pazireshino.presentation.api.exception_handlers import (
        setup_exception_handlers,
    )

    app = FastAPI()
    setup_exception_handlers(app)
"""

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pazireshino.domain.shared.exceptions import DomainException, ErrorCode

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong"


# =============================================================================
# Error Code to HTTP Status Mapping
# =============================================================================

ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    # 400 Bad Request
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PASSWORD_MISMATCH: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_FIELD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_RESET_TOKEN: status.HTTP_400_BAD_REQUEST,
    # 401 Unauthorized
    ErrorCode.AUTHENTICATION_FAILED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.NOT_AUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    # 404 Not Found
    ErrorCode.ENTITY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ROUTE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    # 500 Internal Server Error
    ErrorCode.DELIVERY_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _get_status_for_exception(exc: DomainException) -> int:
    return ERROR_CODE_TO_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)


def _status_label(status_code: int) -> str:
    return "fail" if 400 <= status_code < 500 else "error"


def _is_development(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings is not None and settings.is_development)


def _create_error_response(
    request: Request,
    status_code: int,
    message: str,
    error: dict[str, Any] | None = None,
    exc: BaseException | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    content: dict[str, Any] = {
        "status": _status_label(status_code),
        "message": message,
    }
    if _is_development(request):
        content["error"] = error or {}
        if exc is not None:
            content["stack"] = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__),
            )

    return JSONResponse(status_code=status_code, content=content)


def _format_validation_errors(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return ". ".join(messages) or "Invalid input data"


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application.

    Parameters
    ----------
    app
        The FastAPI application instance
    """

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle all domain exceptions with the standard envelope.

        Details are logged, never returned outside development mode.
        """
        status_code = _get_status_for_exception(exc)

        log = logger.error if status_code >= 500 else logger.warning
        log(
            "Domain exception on %s %s: %s (code=%s, details=%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.code.value,
            exc.details,
        )

        return _create_error_response(
            request,
            status_code=status_code,
            message=exc.message,
            error={"code": exc.code.value, "details": exc.details},
            exc=exc,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        message = _format_validation_errors(exc)
        logger.info(
            "Invalid request body on %s %s: %s",
            request.method,
            request.url.path,
            message,
        )
        return _create_error_response(
            request,
            status_code=status.HTTP_400_BAD_REQUEST,
            message=message,
            error={"code": ErrorCode.VALIDATION_ERROR.value},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = f"Cannot find {request.url.path} on this server!"
            code = ErrorCode.ROUTE_NOT_FOUND.value
        else:
            message = str(exc.detail)
            code = ErrorCode.INTERNAL_ERROR.value
        return _create_error_response(
            request,
            status_code=exc.status_code,
            message=message,
            error={"code": code},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unhandled exceptions with consistent error format.

        This is the catch-all for programming errors. Production callers
        only ever see a generic message.
        """
        logger.exception(
            "Unhandled exception on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
        return _create_error_response(
            request,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=str(exc) if _is_development(request) else GENERIC_ERROR_MESSAGE,
            error={"code": ErrorCode.INTERNAL_ERROR.value, "type": type(exc).__name__},
            exc=exc,
        )
