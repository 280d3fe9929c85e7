from __future__ import annotations

from rate_guard.api.routes.greeting import router as greeting_router
from rate_guard.api.routes.health import router as health_router

__all__ = ["greeting_router", "health_router"]
