"""Tests for liveness and readiness endpoints."""

from unittest.mock import Mock

from fastapi.testclient import TestClient

from rate_guard.adapters.rate_limit.base import AbstractCounterStore
from rate_guard.core.app_factory import create_app
from rate_guard.services.guard import RateLimitGuard


def _client(ping_result: bool) -> tuple[TestClient, Mock]:
    store = Mock(spec=AbstractCounterStore)
    store.ping.return_value = ping_result
    return TestClient(create_app(guard=RateLimitGuard.from_store(store))), store


def test_liveness_does_not_touch_store():
    client, store = _client(True)

    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    store.ping.assert_not_called()


def test_readiness_reports_store_ok():
    client, _ = _client(True)

    resp = client.get("/health/ready")

    assert resp.json() == {"status": "ok", "counter_store": "ok"}


def test_readiness_reports_degraded_when_store_down():
    client, _ = _client(False)

    resp = client.get("/health/ready")

    assert resp.status_code == 200
    assert resp.json() == {"status": "degraded", "counter_store": "unavailable"}
