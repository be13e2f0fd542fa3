"""Shared pytest fixtures for cart and API tests."""
from __future__ import annotations

import pytest

from app.core.config import CartConfig, Settings
from app.integrations.cart_storage_port import MemoryCartStorage
from app.services.cart_store import CartStore

HDMI = {"id": 7, "name": "Cable HDMI", "price": 10.0, "stock": 5}


@pytest.fixture(autouse=True)
def _test_env_vars(monkeypatch) -> None:
    """Keep host environment out of settings and rate limits."""
    for name in (
        "REDIS_URL",
        "CART_STORAGE_DIR",
        "WHATSAPP_NUMBER",
        "RATE_LIMIT_REDIS_URL",
        "RATE_LIMIT_TRUST_PROXY",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RATE_LIMIT_DISABLED", "1")


@pytest.fixture()
def hdmi() -> dict:
    return dict(HDMI)


@pytest.fixture()
def store() -> CartStore:
    return CartStore()


@pytest.fixture()
def memory_storage() -> MemoryCartStorage:
    return MemoryCartStorage()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        api_url="http://backend.test/api",
        whatsapp_number="5493417410787",
        message_lang="es",
        port=8000,
        log_level="INFO",
        cart=CartConfig(storage_key="luso-cart", storage_dir=None, redis_url=None),
    )


@pytest.fixture()
def api_client(settings, memory_storage):
    """TestClient over a fresh app bound to in-memory cart storage."""
    from fastapi.testclient import TestClient

    from app.api.api_server import create_api_app

    app = create_api_app(settings=settings, storage=memory_storage)
    with TestClient(app) as client:
        yield client
