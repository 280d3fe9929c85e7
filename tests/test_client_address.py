"""Tests for caller address discovery from proxy headers."""

import pytest
from starlette.requests import Request

from rate_guard.core.client_address import resolve_client_address


def _request(headers: dict[str, str] | None = None, client: tuple[str, int] | None = ("10.9.8.7", 5000)) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


def test_falls_back_to_peer_address() -> None:
    assert resolve_client_address(_request()) == "10.9.8.7"


def test_forwarded_for_wins() -> None:
    request = _request({"X-Forwarded-For": "203.0.113.5", "Proxy-Client-IP": "198.51.100.1"})

    assert resolve_client_address(request) == "203.0.113.5"


def test_first_hop_of_forwarded_chain_is_used() -> None:
    request = _request({"X-Forwarded-For": "203.0.113.5, 10.0.0.2, 10.0.0.3"})

    assert resolve_client_address(request) == "203.0.113.5"


@pytest.mark.parametrize(
    ("headers", "expected"),
    [
        ({"X-Forwarded-For": "unknown", "Proxy-Client-IP": "198.51.100.1"}, "198.51.100.1"),
        ({"X-Forwarded-For": "", "WL-Proxy-Client-IP": "198.51.100.2"}, "198.51.100.2"),
        ({"Proxy-Client-IP": "UNKNOWN", "HTTP_CLIENT_IP": "198.51.100.3"}, "198.51.100.3"),
        ({"HTTP_X_FORWARDED_FOR": "198.51.100.4"}, "198.51.100.4"),
    ],
)
def test_header_fallback_order(headers: dict[str, str], expected: str) -> None:
    assert resolve_client_address(_request(headers)) == expected


def test_forwarded_headers_ignored_when_untrusted() -> None:
    request = _request({"X-Forwarded-For": "203.0.113.5"})

    assert resolve_client_address(request, trust_forwarded_headers=False) == "10.9.8.7"


def test_returns_none_without_any_source() -> None:
    assert resolve_client_address(_request(client=None)) is None
