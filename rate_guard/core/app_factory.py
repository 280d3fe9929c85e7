"""Application factory for the FastAPI app.

Centralizes app construction (metadata, rate limit guard, middleware,
handlers, routers) so tests can build isolated apps with their own
counter store.
"""

from __future__ import annotations

from fastapi import FastAPI

from rate_guard.adapters.rate_limit.factory import create_counter_store
from rate_guard.api.routes import greeting_router, health_router
from rate_guard.core.config import settings
from rate_guard.core.exception_handlers import setup_exception_handlers
from rate_guard.core.logging import configure_logging
from rate_guard.core.middleware import request_id_middleware
from rate_guard.services.guard import RateLimitGuard


def create_app(guard: RateLimitGuard | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        guard: Rate limit guard to install; when omitted one is built on the
            counter store selected by ``RATE_LIMIT_BACKEND``.

    Returns:
        Configured FastAPI app with guard, middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title=settings.app.title,
        description=(
            "Sample API protected by fixed-window rate limits shared through "
            "Redis. Limits are declared per endpoint, either globally or per "
            "caller address, and fail open when the counter store is down."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    app.state.rate_limit_guard = guard or RateLimitGuard.from_store(create_counter_store(settings))

    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)

    app.include_router(greeting_router)
    app.include_router(health_router)

    return app
