from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from rate_guard.core.policy import LimitScope
from rate_guard.core.rate_limit import enforce_rate_limit, limiter
from rate_guard.schemas.greeting import GreetingResponse

router = APIRouter(tags=["Greeting"], dependencies=[Depends(enforce_rate_limit)])


@router.get("/hello", response_model=GreetingResponse)
@limiter.limit(window_seconds=5, max_count=3, scope=LimitScope.PER_CALLER)
def hello() -> GreetingResponse:
    """Greeting limited to 3 requests per 5 seconds per caller address."""

    return GreetingResponse(message="hello", served_at=datetime.now(timezone.utc))


@router.get("/hi", response_model=GreetingResponse)
@limiter.limit(window_seconds=5, max_count=3, scope=LimitScope.GLOBAL)
def hi() -> GreetingResponse:
    """Greeting limited to 3 requests per 5 seconds across all callers."""

    return GreetingResponse(message="hi", served_at=datetime.now(timezone.utc))
