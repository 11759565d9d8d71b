"""
Middleware configuration for the storefront backend.
Request ids, request logging and CORS.
"""

import time
from typing import Callable

import structlog
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import get_settings

logger = structlog.get_logger(__name__)

NEW_ACCESS_TOKEN_HEADER = "X-New-Access-Token"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request once it completes, with status and timing."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        structlog.contextvars.bind_contextvars(method=request.method, path=request.url.path)
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Request failed",
                process_time_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise
        finally:
            structlog.contextvars.unbind_contextvars("method", "path")

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time_ms=round((time.perf_counter() - start) * 1000, 2),
            token_reissued=NEW_ACCESS_TOKEN_HEADER in response.headers,
        )
        return response


def setup_middleware(app):
    """Setup all middleware. Starlette runs the last added middleware first."""
    settings = get_settings()

    app.add_middleware(RequestLoggingMiddleware)

    # Request id must wrap request logging so every line carries it
    app.add_middleware(
        CorrelationIdMiddleware,
        header_name="X-Request-ID",
        update_request_header=True,
    )

    # Cookies carry tokens, so origins are explicit rather than "*"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[NEW_ACCESS_TOKEN_HEADER, "X-Request-ID"],
    )
