"""Application factory for the FastAPI app.

Builds the app together with the components it owns: the record store and
the rate limiter are created once per app and stored on ``app.state``, so
independent apps (and tests) never share data.
"""

from __future__ import annotations

from fastapi import FastAPI

from products_api.adapters.rate_limit.base import AbstractRateLimiter
from products_api.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from products_api.adapters.store.base import AbstractRecordStore
from products_api.adapters.store.in_memory import InMemoryRecordStore
from products_api.api.routes import health_router, products_router
from products_api.core.config import AppSettings, settings
from products_api.core.exception_handlers import setup_exception_handlers
from products_api.core.logging import configure_logging
from products_api.core.middleware import request_id_middleware
from products_api.core.openapi import apply_openapi_customizations


def create_app(
    *,
    store: AbstractRecordStore | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
    app_settings: AppSettings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        store: Record store to serve; a fresh in-memory store by default.
        rate_limiter: Limiter for the products routes; built from settings
            by default.
        app_settings: Overrides the global application settings.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    cfg = app_settings or settings.app

    app = FastAPI(
        title="Products API",
        description=(
            "CRUD and pagination over schema-less products identified by an "
            "integer id. Updates merge the submitted fields into the stored "
            "ones. Requests are rate limited per client address."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    app.state.settings = cfg
    app.state.store = store if store is not None else InMemoryRecordStore()
    app.state.rate_limiter = rate_limiter or InMemorySlidingWindowRateLimiter(
        limit=cfg.rate_limit_requests,
        window_seconds=cfg.rate_limit_window_seconds,
    )

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(health_router)
    app.include_router(products_router)

    apply_openapi_customizations(app)

    return app
