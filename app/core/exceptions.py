"""
Global exception handling for the application.
Every failure is an ErrorResponse carrying a message and an HTTP status code,
rendered as {"success": false, "message": ..., "statusCode": ...}.
"""

from typing import Any, Iterable, Mapping

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)


class ErrorResponse(Exception):
    """Single application error kind: a message plus the HTTP status to answer with."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

    def __repr__(self):
        return f"<ErrorResponse {self.status_code}: {self.message}>"


def validate_required_fields(fields: Mapping[str, Any], required: Iterable[str]) -> None:
    """Raise a 400 listing every required field that is missing or empty."""
    missing = [name for name in required if not fields.get(name)]
    if missing:
        raise ErrorResponse(
            f"Missing required fields: {', '.join(missing)}",
            status.HTTP_400_BAD_REQUEST,
        )


def _error_body(message: str, status_code: int) -> dict:
    return {"success": False, "message": message, "statusCode": status_code}


async def error_response_handler(request: Request, exc: ErrorResponse) -> JSONResponse:
    logger.info(
        "Request rejected",
        path=request.url.path,
        status_code=exc.status_code,
        message=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.status_code))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail), exc.status_code),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and query params collapse into a plain 400."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    message = "Invalid request: " + "; ".join(parts)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(message, status.HTTP_400_BAD_REQUEST),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""
    if isinstance(exc, ErrorResponse):
        return await error_response_handler(request, exc)

    logger.exception("Unexpected error occurred", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            "An unexpected error occurred. Please try again later.",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        ),
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(ErrorResponse, error_response_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
