"""Integrations package - cart storage backends and the catalog backend client."""

from app.integrations.cart_storage_port import (
    CartStoragePort,
    JsonFileCartStorage,
    MemoryCartStorage,
)
from app.integrations.catalog_api import CatalogApiClient, UploadFile
from app.integrations.redis_cart import RedisCartStorage

__all__ = [
    "CartStoragePort",
    "CatalogApiClient",
    "JsonFileCartStorage",
    "MemoryCartStorage",
    "RedisCartStorage",
    "UploadFile",
]
