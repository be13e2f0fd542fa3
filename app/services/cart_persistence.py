"""Keeps a durable copy of a cart store's items and hydrates it at startup."""
from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any

from app.domain.cart import CartLineItem, CartState
from app.integrations.cart_storage_port import CartStoragePort
from app.services.cart_store import CartStore

logger = logging.getLogger(__name__)


def decode_items(payload: Any) -> list[CartLineItem] | None:
    """Decode a stored payload; ``None`` when it is not a valid item list."""
    if payload is None:
        return None
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError:
            return None
    if not isinstance(payload, list):
        return None
    try:
        return [CartLineItem.from_dict(raw) for raw in payload]
    except (KeyError, TypeError, ValueError):
        return None


def encode_items(items: tuple[CartLineItem, ...] | list[CartLineItem]) -> list[dict[str, Any]]:
    return [item.to_dict() for item in items]


_NOTHING = object()


class CartPersistence:
    """Observer that mirrors ``store.state.items`` into a storage port.

    Writes run on a single-worker executor so mutations never wait for I/O.
    Bursts of changes coalesce: the worker always writes the newest items.
    Storage errors never leave this class: reads fall back to an empty cart,
    failed writes are logged and the in-memory state stays authoritative.
    """

    def __init__(
        self,
        store: CartStore,
        storage: CartStoragePort,
        key: str,
        executor: Executor | None = None,
    ) -> None:
        self._store = store
        self._storage = storage
        self._key = key
        self._hydrated = False
        self._unsubscribe: Callable[[], None] | None = None

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="cart-writer"
        )
        self._pending_lock = threading.Lock()
        self._pending: Any = _NOTHING
        self._scheduled = False
        self._idle = threading.Event()
        self._idle.set()

    @property
    def key(self) -> str:
        return self._key

    def hydrate(self) -> bool:
        """Load the saved items into the store once; ``True`` if anything was loaded."""
        if self._hydrated:
            return False
        self._hydrated = True

        try:
            payload = self._storage.load(self._key)
        except Exception as exc:
            logger.warning("Could not read saved cart %s: %s", self._key, exc)
            return False

        if payload is None:
            return False
        items = decode_items(payload)
        if items is None:
            logger.warning("Discarding malformed saved cart %s", self._key)
            return False
        if not items:
            return False
        self._store.load(items)
        return True

    def attach(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(self._on_change)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def save(self) -> None:
        """Write the current items synchronously."""
        self._write(encode_items(self._store.state.items))

    def flush(self, timeout: float | None = None) -> bool:
        """Wait for queued writes; ``False`` if still busy after ``timeout``."""
        return self._idle.wait(timeout)

    def close(self, timeout: float | None = None) -> None:
        self.detach()
        self.flush(timeout)
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _on_change(self, previous: CartState, current: CartState) -> None:
        if previous.items == current.items:
            return
        self._schedule(encode_items(current.items))

    def _schedule(self, payload: list[dict[str, Any]]) -> None:
        with self._pending_lock:
            self._pending = payload
            if self._scheduled:
                return
            self._scheduled = True
            self._idle.clear()
        try:
            self._executor.submit(self._drain)
        except RuntimeError as exc:
            # Executor already shut down
            logger.warning("Cart %s not saved: %s", self._key, exc)
            with self._pending_lock:
                self._pending = _NOTHING
                self._scheduled = False
                self._idle.set()

    def _drain(self) -> None:
        while True:
            with self._pending_lock:
                payload = self._pending
                self._pending = _NOTHING
                if payload is _NOTHING:
                    self._scheduled = False
                    self._idle.set()
                    return
            self._write(payload)

    def _write(self, payload: list[dict[str, Any]]) -> None:
        try:
            self._storage.save(self._key, payload)
        except Exception as exc:
            logger.warning("Could not save cart %s: %s", self._key, exc)


def bind_cart_persistence(
    store: CartStore,
    storage: CartStoragePort,
    key: str,
    executor: Executor | None = None,
) -> CartPersistence:
    """Hydrate ``store`` from ``storage`` then keep the copy in sync."""
    persistence = CartPersistence(store, storage, key, executor=executor)
    persistence.hydrate()
    persistence.attach()
    return persistence
