"""Application-level exception types.

This module defines the domain errors raised by the rate limiting core and
surfaced by the HTTP layer, enabling consistent error handling, logging, and
API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NotRequired, TypedDict

if TYPE_CHECKING:
    from rate_guard.core.policy import Decision


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional so each error only carries what is relevant to it.
    """

    hint: str
    field: str
    limit: int
    window_seconds: int
    retry_after: int
    scope: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ConfigurationError(AppError):
    """Raised when a limit policy or its request context is invalid."""


@dataclass
class LimitExceeded(AppError):
    """Raised by the interception layer when a request is rejected.

    Attributes:
        decision: The evaluator decision that caused the rejection.
    """

    decision: Decision | None = None


class StoreUnavailable(AppError):
    """Raised by counter stores when the atomic operation could not complete.

    Transient by nature (connection refused, timeout). The evaluator resolves
    it fail-open instead of propagating it to the request.
    """
