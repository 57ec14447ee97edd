"""
API middleware for MedLens.

Provides:
- Rate limiting
- Request logging
- Error responses for upstream failures and invalid input
"""

import time
from typing import Callable
from uuid import uuid4

from fastapi import FastAPI, Request, Response, HTTPException
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import settings
from app.core.exceptions import ServiceUnavailableError
from app.utils.file_validators import FileValidationError
from app.utils.logger import bind_request_context, clear_request_context, get_logger

logger = get_logger("middleware")


REQUEST_ID_HEADER = "X-Request-ID"

# Rate limiter using client IP
limiter = Limiter(key_func=get_remote_address)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request/response logging.

    Every request gets an id (taken from X-Request-ID when the client sends
    one) that is bound into the log context and echoed back, together with
    the processing time, in the response headers.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable
    ) -> Response:
        start_time = time.time()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        bind_request_context(request_id, request.method, request.url.path)

        logger.info("Request received", client_ip=get_remote_address(request))

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                error=str(e),
                process_time_ms=int((time.time() - start_time) * 1000)
            )
            clear_request_context()
            raise

        process_time = time.time() - start_time
        logger.info(
            "Request completed",
            status_code=response.status_code,
            process_time_ms=int(process_time * 1000)
        )
        clear_request_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Catches unhandled exceptions and returns safe error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable
    ) -> Response:
        try:
            return await call_next(request)

        except HTTPException:
            raise

        except Exception as e:
            logger.error("Unhandled exception", error=str(e), exc_info=True)
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal Server Error",
                    "message": "An unexpected error occurred. Please try again.",
                    "error_code": "INTERNAL_ERROR"
                }
            )


def setup_error_handlers(app: FastAPI) -> None:
    """Map domain errors onto HTTP responses."""

    @app.exception_handler(ServiceUnavailableError)
    async def service_unavailable_handler(request: Request, exc: ServiceUnavailableError):
        logger.warning("Upstream service unavailable", service=exc.service, error=exc.message)
        return JSONResponse(
            status_code=503,
            content={
                "error": "Service Unavailable",
                "message": "The service is temporarily unavailable. Please try again.",
                "error_code": exc.error_code,
                "service": exc.service
            }
        )

    @app.exception_handler(FileValidationError)
    async def file_validation_handler(request: Request, exc: FileValidationError):
        logger.warning("File validation error", error=exc.message, error_code=exc.error_code)
        return JSONResponse(
            status_code=400,
            content={
                "error": "Validation Error",
                "message": exc.message,
                "error_code": exc.error_code
            }
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        logger.warning("Validation error", error=str(exc))
        return JSONResponse(
            status_code=400,
            content={
                "error": "Validation Error",
                "message": str(exc),
                "error_code": "VALIDATION_ERROR"
            }
        )


def setup_rate_limiting(app: FastAPI) -> None:
    """Setup rate limiting on the application."""
    app.state.limiter = limiter
    limiter.enabled = settings.rate_limit_enabled

    @app.exception_handler(429)
    async def rate_limit_handler(request: Request, exc: Exception):
        return JSONResponse(
            status_code=429,
            content={
                "error": "Rate Limit Exceeded",
                "message": "Too many requests. Please wait before trying again.",
                "error_code": "RATE_LIMIT_EXCEEDED"
            }
        )
