"""Tests for counter store selection."""

from unittest.mock import patch

import pytest

from rate_guard.adapters.rate_limit.factory import create_counter_store
from rate_guard.adapters.rate_limit.in_memory import InMemoryCounterStore
from rate_guard.adapters.rate_limit.redis_store import RedisCounterStore
from rate_guard.core.config import RateLimitSettings, Settings
from rate_guard.core.errors import ConfigurationError


def test_memory_backend() -> None:
    cfg = Settings(rate_limit=RateLimitSettings(backend="memory"))

    assert isinstance(create_counter_store(cfg), InMemoryCounterStore)


def test_redis_backend_builds_lazy_client() -> None:
    cfg = Settings(rate_limit=RateLimitSettings(backend="redis"))

    with patch("rate_guard.adapters.rate_limit.factory.create_redis_client") as create_client:
        store = create_counter_store(cfg)

    assert isinstance(store, RedisCounterStore)
    create_client.assert_called_once_with(cfg.redis)


def test_unknown_backend_raises() -> None:
    cfg = Settings(rate_limit=RateLimitSettings(backend="memory"))
    cfg.rate_limit.backend = "memcached"  # type: ignore[assignment]

    with pytest.raises(ConfigurationError) as exc_info:
        create_counter_store(cfg)

    assert exc_info.value.code == "unknown_counter_backend"
