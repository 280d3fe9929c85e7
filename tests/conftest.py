"""Pytest configuration and fixtures shared across all test modules.

Environment defaults are set before anything imports rate_guard settings,
so the suite never needs a running Redis server.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("RATE_LIMIT_BACKEND", "memory")
os.environ.setdefault("RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("LOG_FORMAT", "json")

from unittest.mock import Mock

import pytest

from rate_guard.adapters.rate_limit.in_memory import InMemoryCounterStore


@pytest.fixture
def clock() -> Mock:
    """Controllable time source starting at t=1000s."""
    return Mock(return_value=1000.0)


@pytest.fixture
def memory_store(clock: Mock) -> InMemoryCounterStore:
    return InMemoryCounterStore(clock=clock)
