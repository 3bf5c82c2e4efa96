"""
Core middleware and exception handlers for the FastAPI application.

Request tracking, timing and the translation of exceptions into the
standard error body. Storage error text is logged, never returned.
"""
from __future__ import annotations

import time
import uuid
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from guesthouse.core.exceptions import BaseAppException, ErrorCode
from guesthouse.core.logging import get_logger, request_id as request_id_ctx
from guesthouse.schemas.common.response import ErrorDetail, ErrorResponse

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Adds a request ID to each request.

    The ID is taken from the incoming X-Request-ID header when present,
    stored in request.state and the logging context, and echoed back.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        req_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = req_id
        token = request_id_ctx.set(req_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)

        response.headers[self.header_name] = req_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration of every request.

    Adds X-Process-Time header with the processing duration in seconds.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        logger.info(
            "Request completed",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "process_time": f"{process_time:.4f}s",
            },
        )
        return response


def get_request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Optional[dict] = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details or {}),
        request_id=get_request_id(request),
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


# -----------------------------------------------------------------------------
# Exception handlers
# -----------------------------------------------------------------------------

async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"Application exception: {exc.error_code.value}",
            exc_info=exc,
            extra={"path": request.url.path, "method": request.method},
        )
        return error_response(request, exc.status_code, exc.error_code.value, "Internal server error")

    logger.info(
        f"Application exception: {exc.error_code.value} - {exc.message}",
        extra={"path": request.url.path, "method": request.method},
    )
    return error_response(request, exc.status_code, exc.error_code.value, exc.message, exc.details)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies, paths and queries are 400, not 422."""
    field_errors = {}
    for error in exc.errors():
        field_path = ".".join(str(part) for part in error["loc"])
        field_errors[field_path] = error["msg"]

    logger.info(
        f"Validation error: {len(field_errors)} field(s) failed validation",
        extra={"path": request.url.path, "method": request.method, "field_errors": field_errors},
    )
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        ErrorCode.VALIDATION_ERROR.value,
        "Request validation failed",
        {"field_errors": field_errors},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    codes = {
        status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN: ErrorCode.INSUFFICIENT_PERMISSIONS,
        status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    }
    fallback = ErrorCode.VALIDATION_ERROR if exc.status_code < 500 else ErrorCode.INTERNAL_ERROR
    code = codes.get(exc.status_code, fallback)
    return error_response(request, exc.status_code, code.value, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unexpected exception: {type(exc).__name__}",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.INTERNAL_ERROR.value,
        "Internal server error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def register_middlewares(app: FastAPI) -> None:
    """
    Register core middlewares.

    Middlewares run in reverse order of registration: the request ID is
    bound first so the timing log line carries it.
    """
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    logger.debug("Core middlewares registered", extra={"middlewares": ["RequestIDMiddleware", "TimingMiddleware"]})


__all__ = [
    "RequestIDMiddleware",
    "TimingMiddleware",
    "register_middlewares",
    "register_exception_handlers",
    "get_request_id",
    "error_response",
]
