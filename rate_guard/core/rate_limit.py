"""Rate limiting integration for FastAPI routes.

This module wires the rate limiting guard into the HTTP layer.

Design goals:
- Declarative: endpoints opt in with ``@limiter.limit(...)``, which records the
  policy in an explicit registration table and leaves the function untouched.
- Minimal coupling: routers depend on one dependency function only.
- Injected store: the guard lives on ``app.state`` and is built by the app
  factory, so tests and deployments choose the counter store.

Key policy (per endpoint):
- GLOBAL: one counter for the endpoint, shared by all callers.
- PER_CALLER: one counter per endpoint and caller address.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from fastapi import Request, Response

from rate_guard.core.client_address import resolve_client_address
from rate_guard.core.config import settings
from rate_guard.core.errors import ConfigurationError, LimitExceeded
from rate_guard.core.policy import Decision, LimitPolicy, LimitScope
from rate_guard.services.guard import RateLimitGuard

F = TypeVar("F", bound=Callable[..., Any])


def operation_identifier(func: Callable[..., Any]) -> str:
    """Stable identifier of a protected operation, e.g. ``pkg.module-hello``."""

    return f"{func.__module__}-{func.__qualname__}"


class RateLimitRegistry:
    """Registration table mapping operation identifiers to limit policies."""

    def __init__(self) -> None:
        self._policies: dict[str, LimitPolicy] = {}

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._policies

    def register(self, identifier: str, policy: LimitPolicy) -> None:
        """Attach a policy to an operation.

        Raises:
            ConfigurationError: If the operation already has a different policy.
        """
        existing = self._policies.get(identifier)
        if existing is not None and existing != policy:
            raise ConfigurationError(
                code="duplicate_limit_policy",
                message=f"Operation '{identifier}' already has a rate limit policy",
                details={"field": "operation_identifier"},
            )
        self._policies[identifier] = policy

    def policy_for(self, identifier: str) -> LimitPolicy | None:
        return self._policies.get(identifier)

    def limit(
        self,
        *,
        window_seconds: int | None = None,
        max_count: int | None = None,
        scope: LimitScope | str = LimitScope.GLOBAL,
        key_prefix: str | None = None,
    ) -> Callable[[F], F]:
        """Decorator registering a rate limit for a route function.

        Omitted parameters fall back to the ``RATE_LIMIT_*`` settings.
        Place it below the router decorator so the router sees the same
        function object that was registered:

            @router.get("/hello")
            @limiter.limit(window_seconds=5, max_count=3, scope=LimitScope.PER_CALLER)
            async def hello(): ...

        Raises:
            ConfigurationError: If the resulting policy is invalid.
        """
        policy = LimitPolicy(
            key_prefix=settings.rate_limit.key_prefix if key_prefix is None else key_prefix,
            window_seconds=(
                settings.rate_limit.default_window_seconds if window_seconds is None else window_seconds
            ),
            max_count=settings.rate_limit.default_max_count if max_count is None else max_count,
            scope=scope,
        )

        def decorator(func: F) -> F:
            self.register(operation_identifier(func), policy)
            return func

        return decorator


# Process-wide registration table used by route modules.
limiter = RateLimitRegistry()


def get_rate_limit_guard(request: Request) -> RateLimitGuard:
    """Return the guard installed on the application by the app factory."""

    guard = getattr(request.app.state, "rate_limit_guard", None)
    if guard is None:
        raise ConfigurationError(
            code="rate_limit_guard_missing",
            message="Rate limiting is enabled but no guard is installed on the application",
            details={"hint": "Build the app with rate_guard.core.app_factory.create_app()"},
        )
    return guard


def _rate_limit_headers(decision: Decision) -> dict[str, str]:
    return {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
    }


def enforce_rate_limit(request: Request, response: Response) -> None:
    """FastAPI dependency enforcing the policy registered for the endpoint.

    Declared as a plain function so FastAPI runs it in the threadpool and the
    blocking store round-trip never stalls the event loop. Endpoints without a
    registered policy pass through untouched.

    Args:
        request: FastAPI request.
        response: Response used to attach X-RateLimit-* headers on admission.

    Raises:
        LimitExceeded: When the request is over the limit (rendered as 429).
        ConfigurationError: When a PER_CALLER policy has no caller address.
    """

    if not settings.rate_limit.enabled:
        return

    endpoint = request.scope.get("endpoint")
    if endpoint is None:
        return

    identifier = operation_identifier(endpoint)
    policy = limiter.policy_for(identifier)
    if policy is None:
        return

    caller_address = None
    if policy.scope is LimitScope.PER_CALLER:
        caller_address = resolve_client_address(
            request,
            trust_forwarded_headers=settings.rate_limit.trust_forwarded_headers,
        )

    decision = get_rate_limit_guard(request).check_limit(identifier, caller_address, policy)

    if decision.admitted:
        if settings.rate_limit.include_headers and decision.store_available:
            response.headers.update(_rate_limit_headers(decision))
        return

    raise LimitExceeded(
        code="rate_limit_exceeded",
        message="Rate limit exceeded. Try again later.",
        details={
            "limit": decision.limit,
            "window_seconds": decision.window_seconds,
            "retry_after": decision.window_seconds,
            "scope": policy.scope.value,
        },
        decision=decision,
    )
