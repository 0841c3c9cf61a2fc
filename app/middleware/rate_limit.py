from __future__ import annotations

import os
from collections.abc import Callable
from typing import TypedDict

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from limits import parse as parse_limit
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter
from slowapi import Limiter


class RateLimitInfo(TypedDict, total=False):
    method: str
    key: str
    limit: str


READ_LIMIT = "120/minute"
WRITE_LIMIT = "60/minute"
# Per-route limit applied with the slowapi decorator
LOGIN_LIMIT = "10/minute"

_storage = MemoryStorage()
_rate = MovingWindowRateLimiter(_storage)


def _client_key(request: Request) -> str:
    # Authenticated callers are limited per user, anonymous ones per IP
    user_id = request.headers.get("x-user-id")
    if user_id:
        return f"user:{user_id}"
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return f"ip:{xff.split(',')[0].strip()}"
    if request.client and request.client.host:
        return f"ip:{request.client.host}"
    return "ip:local"


def _enabled() -> bool:
    # RATE_LIMIT_ENABLED=1 forces limits on even under TESTING
    if os.getenv("RATE_LIMIT_ENABLED") in {"1", "true", "TRUE"}:
        return True
    return not os.getenv("TESTING")


limiter = Limiter(key_func=_client_key, enabled=_enabled())


def _limit_for_method(method: str) -> str | None:
    m = method.upper()
    if m in {"GET", "HEAD"}:
        return READ_LIMIT
    if m in {"POST", "PUT", "PATCH", "DELETE"}:
        return WRITE_LIMIT
    return None


async def rate_limit_middleware(request: Request, call_next: Callable) -> Response:
    if not _enabled():
        return await call_next(request)

    limit_str = _limit_for_method(request.method)
    if not limit_str:
        return await call_next(request)

    client = _client_key(request)
    if not _rate.hit(parse_limit(limit_str), f"{client}|m:{request.method.upper()}"):
        info: RateLimitInfo = {
            "method": request.method.upper(),
            "key": client,
            "limit": limit_str,
        }
        request.state.rate_limit_info = info
        return JSONResponse(
            status_code=429,
            content={
                "error": {
                    "code": "rate_limited",
                    "message": "Too Many Requests",
                    "detail": info,
                }
            },
        )

    response = await call_next(request)
    response.headers.setdefault("X-RateLimit-Limit", limit_str)
    return response
