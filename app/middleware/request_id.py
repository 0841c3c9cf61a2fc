from __future__ import annotations

import time
import uuid
from collections.abc import Callable

import sentry_sdk
import structlog
from fastapi import Request, Response

REQUEST_ID_HEADER = "X-Request-ID"
USER_ID_HEADER = "X-User-Id"


def _elapsed_ms(start_ns: int) -> float:
    return round((time.perf_counter_ns() - start_ns) / 1_000_000.0, 3)


async def request_id_middleware(request: Request, call_next: Callable) -> Response:
    """Propagate X-Request-ID and write one ``http_request`` access log line.

    ``request_id``, ``path``, ``method`` and the acting ``user_id`` (when the
    caller sent one) are bound to structlog contextvars, so every service log
    emitted while handling the request carries them.
    """
    logger = structlog.get_logger(__name__)

    rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    user_id = request.headers.get(USER_ID_HEADER)

    bindings = {"request_id": rid, "path": request.url.path, "method": request.method}
    if user_id:
        bindings["user_id"] = user_id
    structlog.contextvars.bind_contextvars(**bindings)

    try:
        sentry_sdk.set_tag("request_id", rid)
        sentry_sdk.set_tag("path", request.url.path)
        if user_id:
            sentry_sdk.set_user({"id": user_id})
    except Exception:
        # Sentry scope errors must not break request handling
        pass

    client_ip = (request.client.host if request.client else None) or "-"
    start_ns = time.perf_counter_ns()
    try:
        response = await call_next(request)
    except Exception:
        logger.error(
            "http_request",
            status=500,
            duration_ms=_elapsed_ms(start_ns),
            client_ip=client_ip,
            exc_info=True,
        )
        structlog.contextvars.clear_contextvars()
        raise

    logger.info(
        "http_request",
        status=response.status_code,
        duration_ms=_elapsed_ms(start_ns),
        client_ip=client_ip,
    )
    response.headers[REQUEST_ID_HEADER] = rid
    structlog.contextvars.clear_contextvars()
    return response
