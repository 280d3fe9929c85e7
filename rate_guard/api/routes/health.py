from __future__ import annotations

from fastapi import APIRouter, Request

from rate_guard.core.rate_limit import get_rate_limit_guard
from rate_guard.schemas.greeting import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Liveness check; never touches the counter store."""

    return HealthResponse(status="ok")


@router.get("/health/ready", response_model=HealthResponse)
def readiness_check(request: Request) -> HealthResponse:
    """Readiness check reporting counter store reachability.

    An unreachable store does not fail the check: limited endpoints keep
    serving (fail-open), so the service is reported as degraded instead.
    """

    if get_rate_limit_guard(request).store.ping():
        return HealthResponse(status="ok", counter_store="ok")
    return HealthResponse(status="degraded", counter_store="unavailable")
