"""Redis-backed cart storage with TTL and in-memory fallback."""
from __future__ import annotations

import json
import logging
import time
from typing import Any

from app.core import redis_cache
from app.core.constants import CART_EXPIRY_SECONDS

logger = logging.getLogger(__name__)


class RedisCartStorage:
    """Cart storage persisted in Redis with a 24h TTL.

    Any Redis failure switches the instance to in-memory mode for the rest
    of the process; reads and writes keep working against memory.
    """

    CART_EXPIRY_SECONDS = CART_EXPIRY_SECONDS

    def __init__(self, redis_url: str | None = None):
        self._redis_url = redis_url
        self._client = redis_cache.create_redis_client(redis_url)
        self._memory_carts: dict[str, str] = {}
        self._memory_last_access: dict[str, float] = {}

    @property
    def is_redis_enabled(self) -> bool:
        return self._client is not None

    def _switch_to_memory_fallback(self, reason: Exception | str) -> None:
        logger.warning("Redis cart fallback to memory mode: %s", reason)
        self._client = None

    def _cleanup_memory_expired(self) -> None:
        now = time.time()
        expired = [
            key
            for key, last_access in self._memory_last_access.items()
            if now - last_access > self.CART_EXPIRY_SECONDS
        ]
        for key in expired:
            self._memory_carts.pop(key, None)
            self._memory_last_access.pop(key, None)

    def _memory_load(self, key: str) -> str | None:
        self._cleanup_memory_expired()
        raw = self._memory_carts.get(key)
        if raw is not None:
            self._memory_last_access[key] = time.time()
        return raw

    def _memory_save(self, key: str, serialized: str | None) -> None:
        if serialized is None:
            self._memory_carts.pop(key, None)
            self._memory_last_access.pop(key, None)
            return
        self._memory_carts[key] = serialized
        self._memory_last_access[key] = time.time()

    def load(self, key: str) -> Any | None:
        raw: str | None
        if self._client:
            try:
                raw = self._client.get(key)
            except Exception as exc:
                self._switch_to_memory_fallback(exc)
                raw = self._memory_load(key)
        else:
            raw = self._memory_load(key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable cart payload for %s", key)
            return None

    def save(self, key: str, items: list[dict[str, Any]]) -> None:
        if not items:
            if self._client:
                try:
                    self._client.delete(key)
                    return
                except Exception as exc:
                    self._switch_to_memory_fallback(exc)
            self._memory_save(key, None)
            return

        serialized = json.dumps(items, ensure_ascii=False)
        if self._client:
            try:
                self._client.setex(key, self.CART_EXPIRY_SECONDS, serialized)
                return
            except Exception as exc:
                self._switch_to_memory_fallback(exc)
        self._memory_save(key, serialized)
