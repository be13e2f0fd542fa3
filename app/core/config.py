"""Environment-driven configuration objects for the storefront service."""
from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from app.core.constants import (
    CART_STORAGE_KEY,
    DEFAULT_API_URL,
    DEFAULT_PORT,
    MAX_CART_SESSIONS,
    WHATSAPP_PLACEHOLDER_NUMBER,
)
from app.core.exceptions import ConfigurationException


def _str_or_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_int(name: str, default: int) -> int:
    value = _str_or_none(os.getenv(name))
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationException(f"{name} must be an integer, got {value!r}") from exc


@dataclass(slots=True)
class CartConfig:
    storage_key: str
    storage_dir: str | None
    redis_url: str | None
    max_sessions: int = MAX_CART_SESSIONS


@dataclass(slots=True)
class Settings:
    api_url: str
    whatsapp_number: str
    message_lang: str
    port: int
    log_level: str
    cart: CartConfig
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @property
    def redis_url(self) -> str | None:
        """Shortcut used by storage factories."""
        return self.cart.redis_url


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    # A missing number must not block the hand-off; fall back to the placeholder
    whatsapp_number = _str_or_none(os.getenv("WHATSAPP_NUMBER")) or WHATSAPP_PLACEHOLDER_NUMBER

    cart = CartConfig(
        storage_key=_str_or_none(os.getenv("CART_STORAGE_KEY")) or CART_STORAGE_KEY,
        storage_dir=_str_or_none(os.getenv("CART_STORAGE_DIR")),
        redis_url=_str_or_none(os.getenv("REDIS_URL")),
        max_sessions=_parse_int("CART_MAX_SESSIONS", MAX_CART_SESSIONS),
    )

    return Settings(
        api_url=(_str_or_none(os.getenv("API_URL")) or DEFAULT_API_URL).rstrip("/"),
        whatsapp_number=whatsapp_number,
        message_lang=(_str_or_none(os.getenv("MESSAGE_LANG")) or "es").lower(),
        port=_parse_int("PORT", DEFAULT_PORT),
        log_level=(_str_or_none(os.getenv("LOG_LEVEL")) or "INFO").upper(),
        cart=cart,
        cors_origins=_split_csv(os.getenv("CORS_ORIGINS")) or ["*"],
    )
