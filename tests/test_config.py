from __future__ import annotations

import pytest

from app.core import config, redis_cache
from app.core.cart_storage import build_cart_storage
from app.core.config import CartConfig, Settings, load_settings
from app.core.exceptions import ConfigurationException
from app.integrations.cart_storage_port import JsonFileCartStorage, MemoryCartStorage
from app.integrations.redis_cart import RedisCartStorage


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch) -> None:
    monkeypatch.setattr(config, "load_dotenv", lambda *args, **kwargs: False)
    for name in (
        "API_URL",
        "CART_STORAGE_KEY",
        "CART_MAX_SESSIONS",
        "MESSAGE_LANG",
        "PORT",
        "LOG_LEVEL",
        "CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_environment() -> None:
    settings = load_settings()

    assert settings.whatsapp_number == "1234567890"
    assert settings.api_url == "http://localhost:3006/api"
    assert settings.message_lang == "es"
    assert settings.port == 8000
    assert settings.cart.storage_key == "luso-cart"
    assert settings.cart.storage_dir is None
    assert settings.cart.max_sessions == 10_000
    assert settings.redis_url is None
    assert settings.cors_origins == ["*"]


def test_blank_whatsapp_number_falls_back_to_placeholder(monkeypatch) -> None:
    monkeypatch.setenv("WHATSAPP_NUMBER", "   ")

    assert load_settings().whatsapp_number == "1234567890"


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("WHATSAPP_NUMBER", "5493417410787")
    monkeypatch.setenv("API_URL", "https://api.luso.test/api/")
    monkeypatch.setenv("MESSAGE_LANG", "EN")
    monkeypatch.setenv("REDIS_URL", "redis://cache:6379/1")
    monkeypatch.setenv("CART_STORAGE_DIR", "/var/lib/carts")
    monkeypatch.setenv("CORS_ORIGINS", "https://luso.test, https://admin.luso.test")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("CART_MAX_SESSIONS", "500")

    settings = load_settings()

    assert settings.whatsapp_number == "5493417410787"
    assert settings.api_url == "https://api.luso.test/api"
    assert settings.message_lang == "en"
    assert settings.redis_url == "redis://cache:6379/1"
    assert settings.cart.storage_dir == "/var/lib/carts"
    assert settings.cors_origins == ["https://luso.test", "https://admin.luso.test"]
    assert settings.port == 9000
    assert settings.cart.max_sessions == 500


def test_invalid_port_is_a_configuration_error(monkeypatch) -> None:
    monkeypatch.setenv("PORT", "eighty")

    with pytest.raises(ConfigurationException):
        load_settings()


def _settings_with(redis_url=None, storage_dir=None) -> Settings:
    return Settings(
        api_url="http://backend.test/api",
        whatsapp_number="1234567890",
        message_lang="es",
        port=8000,
        log_level="INFO",
        cart=CartConfig(storage_key="luso-cart", storage_dir=storage_dir, redis_url=redis_url),
    )


def test_storage_selection_prefers_redis(monkeypatch, tmp_path) -> None:
    def _unreachable(*args, **kwargs):
        raise ConnectionError("no redis here")

    monkeypatch.setattr(redis_cache.redis, "from_url", _unreachable)

    redis_storage = build_cart_storage(_settings_with("redis://cache:6379/0", str(tmp_path)))
    file_storage = build_cart_storage(_settings_with(storage_dir=str(tmp_path)))
    memory_storage = build_cart_storage(_settings_with())

    assert isinstance(redis_storage, RedisCartStorage)
    assert redis_storage.is_redis_enabled is False
    assert isinstance(file_storage, JsonFileCartStorage)
    assert isinstance(memory_storage, MemoryCartStorage)
