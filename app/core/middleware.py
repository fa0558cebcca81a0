"""
Middleware configuration for the application.
Includes Correlation ID setup and request logging middleware.
"""

import time
import structlog
from typing import Callable
from fastapi import Request, Response
from asgi_correlation_id import CorrelationIdMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its outcome and timing."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        structlog.contextvars.bind_contextvars(method=request.method, path=request.url.path)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Request failed",
                process_time_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise
        else:
            logger.info(
                "Request completed",
                status_code=response.status_code,
                client_ip=request.client.host if request.client else "unknown",
                process_time_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            return response
        finally:
            structlog.contextvars.unbind_contextvars("method", "path")


def setup_middleware(app):
    """Setup all middleware for the application."""

    # Starlette runs middleware in reverse order of addition: logging runs
    # inside the correlation id scope.
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CorrelationIdMiddleware,
        header_name="X-Request-ID",
        update_request_header=True,
    )
