"""Factory for the configured counter store."""

from __future__ import annotations

from rate_guard.adapters.rate_limit.base import AbstractCounterStore
from rate_guard.adapters.rate_limit.in_memory import InMemoryCounterStore
from rate_guard.adapters.rate_limit.redis_store import RedisCounterStore, create_redis_client
from rate_guard.core.config import Settings, settings as default_settings
from rate_guard.core.errors import ConfigurationError


def create_counter_store(app_settings: Settings | None = None) -> AbstractCounterStore:
    """Instantiate the counter store selected by RATE_LIMIT_BACKEND.

    Args:
        app_settings: Settings to read; defaults to the global settings.

    Returns:
        AbstractCounterStore: Redis store for "redis", in-memory for "memory".

    Raises:
        ConfigurationError: If the backend name is unknown.
    """
    cfg = app_settings or default_settings
    backend = cfg.rate_limit.backend.lower()

    if backend == "redis":
        return RedisCounterStore(create_redis_client(cfg.redis))

    if backend == "memory":
        return InMemoryCounterStore()

    raise ConfigurationError(
        code="unknown_counter_backend",
        message=f"Unknown rate limit backend: '{backend}'. Supported backends: redis, memory",
        details={"field": "backend"},
    )
