"""HTTP middleware for request correlation and timing.

Every response, including 500s, carries the request's correlation id:
- the incoming X-Request-ID header is reused, otherwise a UUID is generated
- the id lives in a contextvar while the request runs, so log records and
  error bodies pick it up
- unexpected exceptions are rendered here, before the id is cleared, instead
  of falling through to Starlette's outer error middleware

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from products_api.core.config import settings
from products_api.core.exception_handlers import general_exception_handler
from products_api.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)


async def request_id_middleware(request: Request, call_next) -> Response:
    """Run the request under a correlation id and stamp it on the response.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response with ``X-Request-ID`` and ``X-Request-Duration-ms`` headers.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    started = time.perf_counter()
    try:
        response: Response = await call_next(request)
    except Exception as exc:
        response = await general_exception_handler(request, exc)
    finally:
        clear_request_id()

    elapsed_ms = (time.perf_counter() - started) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{elapsed_ms:.2f}")

    logger.debug(
        "request.completed",
        extra={
            "request_id": request_id,
            "request_method": request.method,
            "request_path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
        },
    )
    return response
