from __future__ import annotations

import os

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.constants import DEFAULT_RATE_LIMIT

_TRUTHY = {"1", "true", "yes"}


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUTHY


def _forwarded_ip(request: Request) -> str | None:
    """First hop recorded by the reverse proxy, if any."""
    for hop in request.headers.get("X-Forwarded-For", "").split(","):
        if hop.strip():
            return hop.strip()
    real_ip = request.headers.get("X-Real-IP", "").strip()
    return real_ip or None


def rate_limit_key(request: Request) -> str:
    """Client address used to bucket requests.

    Proxy headers are client-controlled, so they only count when
    ``RATE_LIMIT_TRUST_PROXY`` says the app sits behind a proxy that sets them.
    """
    if _env_flag("RATE_LIMIT_TRUST_PROXY"):
        forwarded = _forwarded_ip(request)
        if forwarded:
            return forwarded
    return get_remote_address(request)


def build_limiter() -> Limiter:
    """Fresh limiter per app so counters are not shared between app instances."""
    limits = [] if _env_flag("RATE_LIMIT_DISABLED") else [
        os.getenv("RATE_LIMIT_DEFAULT", DEFAULT_RATE_LIMIT)
    ]
    storage_uri = os.getenv("RATE_LIMIT_REDIS_URL") or None
    if storage_uri:
        return Limiter(key_func=rate_limit_key, default_limits=limits, storage_uri=storage_uri)
    return Limiter(key_func=rate_limit_key, default_limits=limits)


__all__ = ["build_limiter", "rate_limit_key"]
