"""Cart storage selection shared by the API server and scripts."""
from __future__ import annotations

import logging

from app.core.config import Settings
from app.integrations.cart_storage_port import (
    CartStoragePort,
    JsonFileCartStorage,
    MemoryCartStorage,
)
from app.integrations.redis_cart import RedisCartStorage

logger = logging.getLogger(__name__)


def build_cart_storage(settings: Settings) -> CartStoragePort:
    """Redis when configured, else JSON files, else process memory."""
    if settings.redis_url:
        return RedisCartStorage(redis_url=settings.redis_url)
    if settings.cart.storage_dir:
        logger.info("Cart storage: JSON files in %s", settings.cart.storage_dir)
        return JsonFileCartStorage(settings.cart.storage_dir)
    logger.warning("No durable cart storage configured; carts live in memory only")
    return MemoryCartStorage()


__all__ = ["build_cart_storage"]
