"""In-memory counter store.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state, which makes each increment
  atomic within the process.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from rate_guard.adapters.rate_limit.base import AbstractCounterStore


@dataclass
class _CounterState:
    count: int
    expires_at: float


class InMemoryCounterStore(AbstractCounterStore):
    """Counter store keeping fixed windows in a process-local dict.

    Windows are anchored to the first hit after a counter is absent or expired,
    matching the TTL semantics of the Redis store.

    Important:
        Limits are not shared between processes. Use the Redis store whenever
        the API runs with more than one worker.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the in-memory store.

        Args:
            clock: Time source returning seconds; monotonic by default.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._state_by_key: dict[str, _CounterState] = {}

    def _is_expired(self, state: _CounterState, now: float) -> bool:
        return now >= state.expires_at

    def increment(self, key: str, window_seconds: int) -> int:
        """Increment the counter for key, creating a fresh window if needed.

        Args:
            key: Rate limit key.
            window_seconds: Expiry applied when a new window starts.

        Returns:
            Counter value after the increment.

        Raises:
            ValueError: If key is empty or window_seconds is invalid.
        """
        if not key:
            raise ValueError("key must be a non-empty string")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")

        with self._lock:
            now = self._clock()
            state = self._state_by_key.get(key)
            if state is None or self._is_expired(state, now):
                self._evict_expired_locked(now)
                state = _CounterState(count=0, expires_at=now + window_seconds)
                self._state_by_key[key] = state
            state.count += 1
            return state.count

    def peek(self, key: str) -> int | None:
        """Return the live counter for key without mutating it."""

        with self._lock:
            state = self._state_by_key.get(key)
            if state is None or self._is_expired(state, self._clock()):
                return None
            return state.count

    def _evict_expired_locked(self, now: float) -> None:
        expired_keys = [k for k, s in self._state_by_key.items() if self._is_expired(s, now)]
        for key in expired_keys:
            del self._state_by_key[key]
