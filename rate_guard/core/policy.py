"""Value types shared by the key resolver, evaluator and HTTP layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rate_guard.core.errors import ConfigurationError


class LimitScope(str, Enum):
    """Partitioning of a limit.

    GLOBAL limits the operation irrespective of caller; PER_CALLER keeps a
    separate counter per caller address.
    """

    GLOBAL = "global"
    PER_CALLER = "per_caller"

    @classmethod
    def _missing_(cls, value: object) -> LimitScope | None:
        # Accept enum names and the legacy "default"/"ip" spellings.
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower()
        aliases = {
            "default": cls.GLOBAL,
            "ip": cls.PER_CALLER,
        }
        if normalized in aliases:
            return aliases[normalized]
        for member in cls:
            if member.value == normalized:
                return member
        return None


@dataclass(frozen=True)
class LimitPolicy:
    """Limit parameters declared for one protected operation.

    Attributes:
        key_prefix: Namespace prepended to every key built for this policy.
        window_seconds: Length of the fixed counting window.
        max_count: Requests admitted per window.
        scope: Whether the counter is shared or partitioned by caller.

    Raises:
        ConfigurationError: If window_seconds or max_count is not positive.
    """

    key_prefix: str = "rate_limit:"
    window_seconds: int = 60
    max_count: int = 100
    scope: LimitScope = LimitScope.GLOBAL

    def __post_init__(self) -> None:
        validate_limit_params(self.window_seconds, self.max_count)
        # Coerce string scopes coming from config files or env vars.
        if not isinstance(self.scope, LimitScope):
            try:
                scope = LimitScope(self.scope)
            except ValueError as exc:
                raise ConfigurationError(
                    code="invalid_limit_scope",
                    message=f"Unknown limit scope: {self.scope!r}",
                    details={"field": "scope"},
                ) from exc
            object.__setattr__(self, "scope", scope)


@dataclass(frozen=True)
class Decision:
    """Outcome of a single limit evaluation.

    Attributes:
        admitted: Whether the request may proceed.
        current_count: Counter value after this request's increment
            (0 when the store could not be reached).
        limit: Configured maximum per window.
        window_seconds: Configured window length.
        store_available: False when the decision was made fail-open.
    """

    admitted: bool
    current_count: int
    limit: int
    window_seconds: int
    store_available: bool = True

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.current_count)


def validate_limit_params(window_seconds: int, max_count: int) -> None:
    """Reject non-positive (or non-integer) window and count values.

    Raises:
        ConfigurationError: If either value is invalid.
    """
    for field, value in (("window_seconds", window_seconds), ("max_count", max_count)):
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigurationError(
                code="invalid_limit_policy",
                message=f"{field} must be a positive integer",
                details={"field": field},
            )
