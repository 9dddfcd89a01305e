"""Error types and the response envelope shared by every endpoint.

Routers raise the ``ApiError`` subclasses below at the point of detection;
the handlers registered by ``register_exception_handlers`` turn them (and
framework/database errors) into ``{"status", "message", "data"}`` bodies.
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("errors")

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"


class ApiError(HTTPException):
    """An HTTPException whose status code is fixed by its subclass."""

    default_status: int = 500

    def __init__(self, message: str, headers: Optional[dict] = None):
        super().__init__(status_code=self.default_status, detail=message, headers=headers)

    @property
    def message(self) -> str:
        return self.detail


class InvalidArgument(ApiError):
    default_status = 400


class Unauthorized(ApiError):
    default_status = 401

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(ApiError):
    default_status = 403


class NotFound(ApiError):
    default_status = 404


class Conflict(ApiError):
    default_status = 409


def api_response(data: Any = None, message: str = "", status: str = STATUS_SUCCESS) -> dict:
    return {"status": status, "message": message, "data": data}


def error_response(
    status_code: int,
    message: str,
    data: Any = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(api_response(data, message, STATUS_ERROR)),
        headers=headers,
    )


def _describe_validation_errors(errors: list) -> str:
    parts = []
    for error in errors:
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Invalid input: " + "; ".join(parts) if parts else "Invalid input"


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.warning(f"Validation error on {request.method} {request.url.path}: {errors}")
    return error_response(400, _describe_validation_errors(errors), data=errors)


def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Rate limit error handler with retry information.

    Kept synchronous: SlowAPIMiddleware calls it directly.
    """
    retry_after = 60
    return error_response(
        429,
        f"Too many requests ({exc.detail}). Please try again in {retry_after} seconds.",
        headers={"Retry-After": str(retry_after)},
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return error_response(500, "Database error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
