"""Rate limit key construction.

A key is ``key_prefix + [caller_address + "-"] + operation_identifier``, where
the caller segment is present only for PER_CALLER policies. Two requests share
a counter exactly when they hit the same operation and, for PER_CALLER, come
from the same address string.
"""

from __future__ import annotations

from rate_guard.core.errors import ConfigurationError
from rate_guard.core.policy import LimitPolicy, LimitScope


class KeyResolver:
    """Derives the counter key for a protected operation. Stateless."""

    def resolve(
        self,
        policy: LimitPolicy,
        operation_identifier: str,
        caller_address: str | None = None,
    ) -> str:
        """Build the rate limit key for one request.

        Args:
            policy: Limit policy of the protected operation.
            operation_identifier: Stable name of the operation (e.g. the
                handler's qualified name).
            caller_address: Canonical caller address; required for
                PER_CALLER policies, ignored otherwise.

        Returns:
            The key string, used verbatim against the counter store.

        Raises:
            ConfigurationError: If the operation identifier is empty, or the
                policy is PER_CALLER and no caller address was supplied.
        """
        if not operation_identifier:
            raise ConfigurationError(
                code="missing_operation_identifier",
                message="A protected operation identifier is required to build a rate limit key",
                details={"field": "operation_identifier"},
            )

        if policy.scope is LimitScope.PER_CALLER:
            if not caller_address:
                raise ConfigurationError(
                    code="missing_caller_address",
                    message="Per-caller rate limiting requires the caller address",
                    details={
                        "field": "caller_address",
                        "scope": policy.scope.value,
                    },
                )
            return f"{policy.key_prefix}{caller_address}-{operation_identifier}"

        return f"{policy.key_prefix}{operation_identifier}"
