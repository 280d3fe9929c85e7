"""Unit tests for the Redis counter store (client mocked)."""

from unittest.mock import MagicMock, patch

import pytest
import redis

from rate_guard.adapters.rate_limit.redis_store import (
    INCREMENT_WITH_WINDOW_LUA,
    RedisCounterStore,
    create_redis_client,
)
from rate_guard.core.config import RedisSettings
from rate_guard.core.errors import StoreUnavailable


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock(spec=redis.Redis)
    client.register_script.return_value = MagicMock()
    return client


def test_registers_script_once(client: MagicMock) -> None:
    RedisCounterStore(client)

    client.register_script.assert_called_once_with(INCREMENT_WITH_WINDOW_LUA)


def test_increment_runs_script_with_key_and_window(client: MagicMock) -> None:
    script = client.register_script.return_value
    script.return_value = 3
    store = RedisCounterStore(client)

    assert store.increment("rate_limit:127.0.0.1-op", 5) == 3
    script.assert_called_once_with(keys=["rate_limit:127.0.0.1-op"], args=[5])


@pytest.mark.parametrize(
    "error",
    [
        redis.exceptions.ConnectionError("Connection refused"),
        redis.exceptions.TimeoutError("Timeout reading from socket"),
    ],
)
def test_transient_errors_become_store_unavailable(client: MagicMock, error: Exception) -> None:
    client.register_script.return_value.side_effect = error
    store = RedisCounterStore(client)

    with pytest.raises(StoreUnavailable) as exc_info:
        store.increment("k", 5)

    assert exc_info.value.code == "counter_store_unavailable"
    assert exc_info.value.__cause__ is error


def test_non_transient_redis_errors_propagate(client: MagicMock) -> None:
    client.register_script.return_value.side_effect = redis.exceptions.ResponseError(
        "WRONGTYPE Operation against a key holding the wrong kind of value"
    )
    store = RedisCounterStore(client)

    with pytest.raises(redis.exceptions.ResponseError):
        store.increment("k", 5)


def test_ping_reports_failures_without_raising(client: MagicMock) -> None:
    store = RedisCounterStore(client)

    client.ping.return_value = True
    assert store.ping() is True

    client.ping.side_effect = redis.exceptions.ConnectionError("down")
    assert store.ping() is False


def test_client_uses_configured_timeouts() -> None:
    cfg = RedisSettings(url="redis://cache:6380/2", socket_timeout_seconds=0.25, connect_timeout_seconds=0.1)

    with patch("rate_guard.adapters.rate_limit.redis_store.redis.Redis.from_url") as from_url:
        create_redis_client(cfg)

    from_url.assert_called_once_with(
        "redis://cache:6380/2",
        decode_responses=True,
        socket_timeout=0.25,
        socket_connect_timeout=0.1,
    )
