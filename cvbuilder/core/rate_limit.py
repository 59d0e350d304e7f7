from __future__ import annotations

from slowapi import Limiter
from starlette.requests import Request

from cvbuilder.core.config import settings


def client_key(request: Request) -> str:
    # Only behind a proxy that overwrites the header; clients can set it freely.
    if settings.trust_x_forwarded_for:
        forwarded_for = request.headers.get("x-forwarded-for", "").strip()
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


limiter = Limiter(key_func=client_key, enabled=settings.rate_limit_enabled)


def rate_limit():
    """Per-client limit for the auth and scoring endpoints; a no-op when disabled."""
    if settings.rate_limit_enabled:
        return limiter.limit(settings.rate_limit)

    def decorator(func):
        return func

    return decorator
