from __future__ import annotations

import json
from dataclasses import dataclass, field

import pytest

from app.integrations.redis_cart import RedisCartStorage
from app.services.cart_persistence import bind_cart_persistence
from app.services.cart_store import CartStore


@dataclass
class FakeRedisClient:
    data: dict[str, str] = field(default_factory=dict)
    expiry: dict[str, int] = field(default_factory=dict)
    setex_calls: list[tuple[str, int]] = field(default_factory=list)
    fail: bool = False

    def ping(self) -> bool:
        return True

    def get(self, key: str):
        if self.fail:
            raise ConnectionError("redis down")
        return self.data.get(key)

    def setex(self, key: str, ttl: int, value: str) -> bool:
        if self.fail:
            raise ConnectionError("redis down")
        self.data[key] = value
        self.expiry[key] = ttl
        self.setex_calls.append((key, ttl))
        return True

    def delete(self, key: str) -> int:
        if self.fail:
            raise ConnectionError("redis down")
        existed = 1 if key in self.data else 0
        self.data.pop(key, None)
        self.expiry.pop(key, None)
        return existed


@pytest.fixture
def fake_redis(monkeypatch):
    import app.core.redis_cache as redis_cache_module

    client = FakeRedisClient()
    monkeypatch.setattr(redis_cache_module.redis, "from_url", lambda *args, **kwargs: client)
    return client


def test_redis_cart_is_shared_between_instances(fake_redis, hdmi) -> None:
    storage_a = RedisCartStorage(redis_url="redis://fake")
    storage_b = RedisCartStorage(redis_url="redis://fake")
    store = CartStore()
    persistence = bind_cart_persistence(store, storage_a, "luso-cart:s1")

    store.add(hdmi)
    persistence.flush(timeout=2)

    restored = CartStore()
    bind_cart_persistence(restored, storage_b, "luso-cart:s1")
    assert restored.state.items == store.state.items


def test_redis_cart_sets_ttl_on_every_save(fake_redis, hdmi) -> None:
    storage = RedisCartStorage(redis_url="redis://fake")
    store = CartStore()
    persistence = bind_cart_persistence(store, storage, "luso-cart:s2")

    store.add(hdmi)
    persistence.flush(timeout=2)
    store.add(hdmi)
    persistence.flush(timeout=2)

    assert len(fake_redis.setex_calls) == 2
    assert fake_redis.expiry["luso-cart:s2"] == RedisCartStorage.CART_EXPIRY_SECONDS
    assert json.loads(fake_redis.data["luso-cart:s2"])[0]["quantity"] == 2


def test_redis_cart_deletes_key_when_emptied(fake_redis, hdmi) -> None:
    storage = RedisCartStorage(redis_url="redis://fake")
    store = CartStore()
    persistence = bind_cart_persistence(store, storage, "luso-cart:s3")
    store.add(hdmi)

    store.remove("7")
    persistence.flush(timeout=2)

    assert "luso-cart:s3" not in fake_redis.data


def test_redis_failure_falls_back_to_memory(fake_redis, hdmi) -> None:
    storage = RedisCartStorage(redis_url="redis://fake")
    store = CartStore()
    persistence = bind_cart_persistence(store, storage, "luso-cart:s4")
    fake_redis.fail = True

    assert store.add(hdmi) is True
    persistence.flush(timeout=2)

    assert storage.is_redis_enabled is False
    assert storage.load("luso-cart:s4")[0]["id"] == "7"


def test_without_redis_url_uses_memory(fake_redis) -> None:
    storage = RedisCartStorage(redis_url=None)

    storage.save("k", [{"id": "1"}])

    assert storage.is_redis_enabled is False
    assert storage.load("k") == [{"id": "1"}]
    assert fake_redis.data == {}


def test_unreadable_payload_is_discarded(fake_redis) -> None:
    fake_redis.data["luso-cart:s5"] = "{oops"
    storage = RedisCartStorage(redis_url="redis://fake")
    store = CartStore()

    bind_cart_persistence(store, storage, "luso-cart:s5")

    assert store.state.items == ()
