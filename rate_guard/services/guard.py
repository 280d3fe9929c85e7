"""Single entry point for interception layers.

``RateLimitGuard.check_limit`` composes key resolution and evaluation in that
order. Interception layers (FastAPI dependencies, decorators, workers) call it
before running a protected operation and abort on ``admitted=False``.
"""

from __future__ import annotations

import logging

from rate_guard.adapters.rate_limit.base import AbstractCounterStore
from rate_guard.core.logging import hash_key
from rate_guard.core.policy import Decision, LimitPolicy
from rate_guard.services.key_resolver import KeyResolver
from rate_guard.services.limit_evaluator import LimitEvaluator

logger = logging.getLogger(__name__)


class RateLimitGuard:
    """Resolves the key for a request and evaluates it against its policy."""

    def __init__(self, evaluator: LimitEvaluator, resolver: KeyResolver | None = None) -> None:
        self._evaluator = evaluator
        self._resolver = resolver or KeyResolver()

    @classmethod
    def from_store(cls, store: AbstractCounterStore) -> RateLimitGuard:
        return cls(LimitEvaluator(store))

    @property
    def store(self) -> AbstractCounterStore:
        return self._evaluator.store

    def check_limit(
        self,
        operation_identifier: str,
        caller_address: str | None,
        policy: LimitPolicy,
    ) -> Decision:
        """Evaluate one invocation of a protected operation.

        Args:
            operation_identifier: Stable name of the protected operation.
            caller_address: Canonical caller address (needed for PER_CALLER).
            policy: Limit parameters declared for the operation.

        Returns:
            The evaluator's decision. The caller is responsible for aborting
            the operation when ``decision.admitted`` is False.

        Raises:
            ConfigurationError: If the policy cannot be applied to this request.
        """
        key = self._resolver.resolve(policy, operation_identifier, caller_address)
        decision = self._evaluator.evaluate(key, policy.window_seconds, policy.max_count)

        log_extra = {
            "operation": operation_identifier,
            "scope": policy.scope.value,
            "key_hash": hash_key(key),
            "limit": decision.limit,
            "current_count": decision.current_count,
            "remaining": decision.remaining,
            "window_s": decision.window_seconds,
        }
        if decision.admitted:
            logger.debug("rate_limit.allowed", extra=log_extra)
        else:
            logger.warning("rate_limit.exceeded", extra=log_extra)

        return decision
