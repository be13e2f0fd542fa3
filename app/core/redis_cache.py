"""Redis client factory shared by Redis-backed storage."""
from __future__ import annotations

import logging
from typing import Any

import redis

logger = logging.getLogger(__name__)


def create_redis_client(redis_url: str | None) -> Any | None:
    """Connect and ping; ``None`` when Redis is not usable."""
    if not redis_url:
        logger.warning("REDIS_URL is not set; using in-memory fallback")
        return None

    try:
        client = redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        client.ping()
        logger.info("Redis connection established")
        return client
    except Exception as exc:
        logger.warning("Redis init failed, fallback to in-memory: %s", exc)
        return None
