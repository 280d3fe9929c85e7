"""Redis-backed counter store.

The increment and the conditional expiry run inside a single Lua script, so
Redis serializes concurrent callers and no two requests can both observe an
absent counter or the same pre-increment value.
"""

from __future__ import annotations

import logging

import redis

from rate_guard.adapters.rate_limit.base import AbstractCounterStore
from rate_guard.core.config import RedisSettings
from rate_guard.core.errors import StoreUnavailable

logger = logging.getLogger(__name__)


# KEYS[1]: counter key, ARGV[1]: window length in seconds.
# A counter that somehow lost its TTL would never reset, so re-arm it too.
INCREMENT_WITH_WINDOW_LUA = """
local current = redis.call('INCR', KEYS[1])
if current == 1 or redis.call('TTL', KEYS[1]) == -1 then
    redis.call('EXPIRE', KEYS[1], tonumber(ARGV[1]))
end
return current
"""


def create_redis_client(redis_settings: RedisSettings) -> redis.Redis:
    """Build the Redis client shared by every evaluation.

    The connection is lazy: an unreachable server surfaces on the first
    increment (and is handled fail-open) rather than at startup.

    Args:
        redis_settings: Connection URL and socket timeouts.

    Returns:
        Configured ``redis.Redis`` instance backed by a connection pool.
    """

    return redis.Redis.from_url(
        redis_settings.url,
        decode_responses=True,
        socket_timeout=redis_settings.socket_timeout_seconds,
        socket_connect_timeout=redis_settings.connect_timeout_seconds,
    )


class RedisCounterStore(AbstractCounterStore):
    """Counter store running the increment as a server-side script."""

    def __init__(self, client: redis.Redis) -> None:
        """Register the increment script on the given client.

        Args:
            client: Configured Redis client; owned by the caller.
        """
        self._client = client
        # EVALSHA with transparent EVAL fallback on NOSCRIPT.
        self._script = client.register_script(INCREMENT_WITH_WINDOW_LUA)

    def increment(self, key: str, window_seconds: int) -> int:
        """Run the increment script once for key.

        Args:
            key: Rate limit key.
            window_seconds: Expiry applied when the counter is created.

        Returns:
            Counter value after the increment.

        Raises:
            StoreUnavailable: On connection errors and socket timeouts.
            redis.exceptions.RedisError: For any other Redis failure (e.g. a
                key holding a non-integer value), which is not transient.
        """
        try:
            result = self._script(keys=[key], args=[window_seconds])
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as exc:
            raise StoreUnavailable(
                code="counter_store_unavailable",
                message="Redis counter store is unreachable",
                details={"context": {"error_type": type(exc).__name__}},
            ) from exc

        return int(result)

    def ping(self) -> bool:
        """Report whether Redis answers, without raising."""

        try:
            return bool(self._client.ping())
        except redis.exceptions.RedisError as exc:
            logger.warning(
                "counter_store.ping_failed",
                extra={"error_type": type(exc).__name__},
            )
            return False
