"""Pydantic schemas for the sample and health endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class GreetingResponse(BaseModel):
    """Response of the rate-limited sample endpoints."""

    message: str = Field(..., description="Greeting text.")
    served_at: datetime = Field(..., description="Server time when the request was admitted.")


class HealthResponse(BaseModel):
    """Liveness/readiness payload."""

    status: Literal["ok", "degraded"] = Field(
        ..., description="'degraded' when the counter store is unreachable (limits fail open)."
    )
    counter_store: Literal["ok", "unavailable"] | None = Field(
        default=None,
        description="Counter store reachability; only reported by the readiness check.",
    )
