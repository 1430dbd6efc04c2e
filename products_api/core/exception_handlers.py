"""Global exception handlers for consistent error responses.

FastAPI exception handlers that turn domain errors, request validation
failures and unexpected exceptions into JSON responses of the form
``{"error": <message>, "code": <code>, "request_id": <id>}``.

Design:
- ValidationAppError / RequestValidationError → 400
- NotFoundAppError → 404
- RateLimitedAppError → 429 (with rate limit headers)
- Unexpected Exception → 500 with the failure message
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from products_api.core.errors import (
    AppError,
    NotFoundAppError,
    RateLimitedAppError,
    ValidationAppError,
)
from products_api.core.logging import get_request_id

logger = logging.getLogger(__name__)


def _status_for(exc: AppError) -> int:
    if isinstance(exc, NotFoundAppError):
        return 404
    if isinstance(exc, RateLimitedAppError):
        return 429
    return 400


def _error_content(code: str, message: str) -> dict:
    return {
        "error": message,
        "code": code,
        "request_id": get_request_id(),
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the mapped status code and error body.
    """
    status_code = _status_for(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
        },
    )

    content = _error_content(exc.code, exc.message)
    if exc.details:
        content["details"] = exc.details

    headers = exc.headers if isinstance(exc, RateLimitedAppError) else None
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _validation_error_from(exc: RequestValidationError) -> ValidationAppError:
    """Translate FastAPI's request validation failure into a domain error.

    Path errors win over query errors, which win over body errors, so a
    request with a bad id is reported as such even if its body is also bad.
    """
    errors = [{"loc": list(err.get("loc", ())), "msg": err.get("msg", "")} for err in exc.errors()]
    sources = {err["loc"][0] for err in errors if err["loc"]}

    if "path" in sources:
        return ValidationAppError(
            code="invalid_product_id",
            message="Invalid Product ID",
            details={"errors": errors},
        )
    if "query" in sources:
        return ValidationAppError(
            code="invalid_query",
            message="Invalid query parameters",
            details={"errors": errors, "hint": "page and per_page must be integers"},
        )
    return ValidationAppError(
        code="invalid_payload",
        message="Invalid Payload. Expected {fields: {...}}",
        details={"errors": errors},
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed requests as 400 instead of FastAPI's default 422."""
    return await app_error_handler(request, _validation_error_from(exc))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors.

    Logs the failure and returns 500 with the exception message. Stack traces
    never reach the client.

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        JSONResponse with status 500.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content=_error_content("internal_server_error", str(exc) or "Internal Server Error"),
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
