"""Global error handlers that keep internal details out of API responses."""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from dblicence_api.config import get_settings
from dblicence_api.exceptions import (
    ConflictError,
    DataAccessError,
    DbLicenceAPIError,
    NotFoundError,
    ValidationError,
)
from dblicence_api.utils.secure_logging import log_error

logger = logging.getLogger(__name__)

# Generic messages returned when a detail is not known to be safe
SAFE_ERROR_MESSAGES = {
    400: "Invalid request",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict with existing resource",
    422: "Invalid input data",
    500: "Internal server error",
    503: "Service temporarily unavailable",
}

# Messages of our own exceptions that may be passed through
ALLOWED_ERROR_PATTERNS = [
    "Resource not found",
    "Not Found",
    "License type not found",
    "Contract not found",
    "Host not found",
    "License type already exists",
    "License type is referenced by contracts",
    "License type technology does not match contract technology",
    "Entity store unavailable",
]


def _get_cors_headers(request: Request) -> dict[str, str]:
    """Get CORS headers for error responses of allowed origins.

    Exception handlers run outside the CORS middleware, so error responses
    need the headers added explicitly.
    """
    origin = request.headers.get("origin")
    if origin and origin in get_settings().cors_origins_list:
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
        }
    return {}


def is_safe_error_message(message: str) -> bool:
    """Check if an error message is safe to expose to users.

    Args:
        message: Error message to check

    Returns:
        True if message is safe to expose
    """
    message_lower = message.lower()
    return any(pattern.lower() in message_lower for pattern in ALLOWED_ERROR_PATTERNS)


def sanitize_error_detail(detail: Any, status_code: int) -> str:
    """Reduce an error detail to a message safe for clients.

    Args:
        detail: Original error detail
        status_code: HTTP status code

    Returns:
        Safe error message
    """
    if isinstance(detail, str):
        if is_safe_error_message(detail):
            return detail
    elif isinstance(detail, list):
        # Validation errors: keep field names and messages only
        safe_errors = []
        for error in detail:
            if isinstance(error, dict):
                loc = error.get("loc", [])
                field = loc[-1] if loc else "field"
                if isinstance(field, str) and not field.startswith("_"):
                    safe_errors.append(f"{field}: {error.get('msg', 'Invalid value')}")
        if safe_errors:
            return "; ".join(safe_errors[:3])

    return SAFE_ERROR_MESSAGES.get(status_code, "Request failed")


def status_code_for(exc: DbLicenceAPIError) -> int:
    """Map a domain exception to its HTTP status code."""
    if isinstance(exc, DataAccessError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def dblicence_exception_handler(request: Request, exc: DbLicenceAPIError) -> JSONResponse:
    """Handle domain exceptions raised by services.

    Args:
        request: FastAPI request
        exc: Domain exception

    Returns:
        JSONResponse with the mapped status code
    """
    status_code = status_code_for(exc)
    if status_code >= 500:
        log_error(logger, f"Request to {request.url.path} failed", exc)

    content: dict[str, Any] = {"detail": sanitize_error_detail(exc.message, status_code)}
    if get_settings().debug and exc.details:
        content["details"] = exc.details

    return JSONResponse(status_code=status_code, content=content, headers=_get_cors_headers(request))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions with sanitized messages."""
    detail = exc.detail if get_settings().debug else sanitize_error_detail(exc.detail, exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": detail},
        headers=_get_cors_headers(request),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors with sanitized messages."""
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")

    if get_settings().debug:
        detail: Any = exc.errors()
    else:
        detail = sanitize_error_detail(exc.errors(), status.HTTP_422_UNPROCESSABLE_ENTITY)

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": detail},
        headers=_get_cors_headers(request),
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle SQLAlchemy exceptions without leaking database details."""
    log_error(logger, f"Database error for {request.url.path}", exc)
    cors_headers = _get_cors_headers(request)

    if isinstance(exc, IntegrityError):
        message = str(exc).lower()
        if "unique" in message or "duplicate" in message:
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content={"detail": "Resource already exists"},
                headers=cors_headers,
            )
        if "foreign key" in message:
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content={"detail": "Resource is still referenced"},
                headers=cors_headers,
            )

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": SAFE_ERROR_MESSAGES[503]},
        headers=cors_headers,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking information."""
    logger.error(f"Unhandled exception for {request.url.path}: {type(exc).__name__}", exc_info=True)

    content: dict[str, Any] = {"detail": SAFE_ERROR_MESSAGES[500]}
    if get_settings().debug:
        content = {"detail": str(exc), "type": type(exc).__name__}

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
        headers=_get_cors_headers(request),
    )
