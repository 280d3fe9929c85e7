"""Caller address discovery for per-caller limits.

Reverse proxies rewrite or omit forwarding headers inconsistently, so the
address is taken from the first usable header in a fixed order and falls back
to the transport peer. Whatever is returned is used verbatim in the rate
limit key, so the order must stay stable across releases.
"""

from __future__ import annotations

from fastapi import Request

# Checked in order; the first non-empty value that is not "unknown" wins.
FORWARDED_ADDRESS_HEADERS: tuple[str, ...] = (
    "X-Forwarded-For",
    "Proxy-Client-IP",
    "WL-Proxy-Client-IP",
    "HTTP_CLIENT_IP",
    "HTTP_X_FORWARDED_FOR",
)


def _usable(value: str | None) -> str | None:
    if value is None:
        return None
    # List-valued headers carry "client, proxy1, proxy2"; keep the client.
    first_hop = value.split(",", 1)[0].strip()
    if not first_hop or first_hop.lower() == "unknown":
        return None
    return first_hop


def resolve_client_address(request: Request, *, trust_forwarded_headers: bool = True) -> str | None:
    """Return the caller address for request, or None if it cannot be known.

    Args:
        request: Incoming request.
        trust_forwarded_headers: Consult proxy headers before the peer address.
            Disable when the service is reachable without a proxy, since the
            headers are client-controlled.

    Returns:
        Address string, or None when there is no usable header and no peer.
    """
    if trust_forwarded_headers:
        for header in FORWARDED_ADDRESS_HEADERS:
            address = _usable(request.headers.get(header))
            if address:
                return address

    if request.client and request.client.host:
        return request.client.host
    return None
