"""HTTP middleware for request ID propagation.

Every request/response pair carries a correlation id. The rate limit layer
relies on it in two places: the rate_limit.allowed, rate_limit.exceeded
and rate_limit.store_unavailable log events pick it up from contextvars, and
the 429 error body returned on rejection echoes it as error.request_id so a
throttled client can quote it. The incoming header is honoured when present;
otherwise a UUID is generated.

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response

from rate_guard.core.config import settings
from rate_guard.core.logging import clear_request_id, set_request_id


async def request_id_middleware(request: Request, call_next) -> Response:
    """Bind the request id for the request lifecycle and echo it back.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The downstream response with the request id header and
            an ``X-Request-Duration-ms`` header added.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response
