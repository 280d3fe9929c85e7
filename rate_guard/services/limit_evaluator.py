"""Fixed-window limit evaluation against the shared counter store.

Each evaluation performs exactly one atomic increment. The window is anchored
to the first request after the counter is absent, so it does not slide with
traffic and only expiry in the store starts a new one.

Store outages fail open: a limiter failure must not turn into an outage of
the protected operation. Only a count strictly above the limit rejects.
"""

from __future__ import annotations

import logging

from rate_guard.adapters.rate_limit.base import AbstractCounterStore
from rate_guard.core.errors import StoreUnavailable
from rate_guard.core.logging import hash_key
from rate_guard.core.policy import Decision, validate_limit_params

logger = logging.getLogger(__name__)


class LimitEvaluator:
    """Turns a counter increment into an admit/reject decision.

    The evaluator holds no per-key state; all coordination between concurrent
    callers (threads, tasks or processes) is delegated to the store.
    """

    def __init__(self, store: AbstractCounterStore) -> None:
        self._store = store

    @property
    def store(self) -> AbstractCounterStore:
        return self._store

    def evaluate(self, key: str, window_seconds: int, max_count: int) -> Decision:
        """Count one request for key and decide whether it is admitted.

        Args:
            key: Resolved rate limit key.
            window_seconds: Window length applied when the counter is created.
            max_count: Requests admitted per window.

        Returns:
            Decision with the post-increment count. When the store is
            unavailable the decision is admitted with ``store_available=False``.

        Raises:
            ConfigurationError: If window_seconds or max_count is not positive.
        """
        validate_limit_params(window_seconds, max_count)

        try:
            current_count = self._store.increment(key, window_seconds)
        except StoreUnavailable as exc:
            logger.warning(
                "rate_limit.store_unavailable",
                extra={
                    "key_hash": hash_key(key),
                    "error_code": exc.code,
                    "error_message": exc.message,
                    "fail_open": True,
                },
            )
            return Decision(
                admitted=True,
                current_count=0,
                limit=max_count,
                window_seconds=window_seconds,
                store_available=False,
            )

        return Decision(
            admitted=current_count <= max_count,
            current_count=current_count,
            limit=max_count,
            window_seconds=window_seconds,
        )
