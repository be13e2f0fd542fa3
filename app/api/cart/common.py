from __future__ import annotations

import logging
import re
import threading
import time
import uuid
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Literal

from cachetools import TTLCache
from fastapi import Cookie, Header, Request, Response
from pydantic import BaseModel, Field

from app.core.config import Settings
from app.core.constants import (
    CART_BADGE_LIMIT,
    CART_EXPIRY_SECONDS,
    CART_SESSION_COOKIE,
    CART_SESSION_HEADER,
    MAX_CART_SESSIONS,
)
from app.domain.cart import CartState
from app.integrations.cart_storage_port import CartStoragePort
from app.services.cart_persistence import CartPersistence
from app.services.cart_store import CartStore

logger = logging.getLogger(__name__)

_SESSION_ID_RE = re.compile(r"^[A-Za-z0-9_-]{8,64}$")


# =============================================================================
# Session registry
# =============================================================================


class _SessionCache(TTLCache):
    """TTL + LRU map of sessions that detaches whatever it drops."""

    def popitem(self):
        key, session = super().popitem()
        session.close()
        return key, session

    def expire(self, time=None):
        expired = super().expire(time)
        for _key, session in expired or ():
            session.close()
        return expired


@dataclass(slots=True)
class CartSession:
    store: CartStore
    persistence: CartPersistence
    lock: threading.Lock = field(default_factory=threading.Lock)
    ready: bool = False

    def close(self) -> None:
        self.persistence.detach()


class CartSessionRegistry:
    """One hydrated :class:`CartStore` per browser session.

    Sessions idle for ``idle_seconds`` are dropped, and at most
    ``max_sessions`` are kept (least recently used go first). Their saved
    copy survives in storage and is hydrated again on the next request.
    """

    def __init__(
        self,
        storage: CartStoragePort,
        key_prefix: str,
        max_sessions: int = MAX_CART_SESSIONS,
        idle_seconds: float = CART_EXPIRY_SECONDS,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._storage = storage
        self._key_prefix = key_prefix
        self._sessions: _SessionCache = _SessionCache(
            maxsize=max_sessions, ttl=idle_seconds, timer=timer
        )
        self._lock = threading.Lock()
        # One writer for every session keeps per-cart writes ordered
        self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="cart-writer")

    def storage_key(self, session_id: str) -> str:
        return f"{self._key_prefix}:{session_id}"

    def get(self, session_id: str) -> CartStore:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                store = CartStore()
                persistence = CartPersistence(
                    store, self._storage, self.storage_key(session_id), executor=self._writer
                )
                session = CartSession(store, persistence)
                logger.debug("Cart session %s opened", session_id)
            # Re-insert to restart the idle timer
            self._sessions[session_id] = session

        # Hydrate before any route sees the store, without holding the registry lock
        if not session.ready:
            with session.lock:
                if not session.ready:
                    session.persistence.hydrate()
                    session.persistence.attach()
                    session.ready = True
        return session.store

    def prune(self) -> None:
        """Drop idle sessions now instead of on the next insert."""
        with self._lock:
            self._sessions.expire()

    def flush(self, timeout: float | None = None) -> None:
        """Wait until every queued cart write has reached storage."""
        self._writer.submit(lambda: None).result(timeout)

    def close(self) -> None:
        self._writer.shutdown(wait=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


def is_valid_session_id(value: str | None) -> bool:
    return bool(value and _SESSION_ID_RE.match(value))


def get_cart_store(
    request: Request,
    response: Response,
    x_cart_session: str | None = Header(default=None, alias=CART_SESSION_HEADER),
    cart_session: str | None = Cookie(default=None, alias=CART_SESSION_COOKIE),
) -> CartStore:
    """Resolve (or issue) the caller's session and return its store."""
    session_id = x_cart_session if is_valid_session_id(x_cart_session) else None
    if session_id is None and is_valid_session_id(cart_session):
        session_id = cart_session
    if session_id is None:
        session_id = uuid.uuid4().hex
        response.set_cookie(CART_SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    response.headers[CART_SESSION_HEADER] = session_id

    registry: CartSessionRegistry = request.app.state.cart_registry
    return registry.get(session_id)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# =============================================================================
# Pydantic Models
# =============================================================================


class ProductIn(BaseModel):
    id: int | str
    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    stock: int = Field(ge=0)
    image_url: str | None = None
    category_name: str | None = None
    subcategory_name: str | None = None


class QuantityIn(BaseModel):
    quantity: int


class CartItemOut(BaseModel):
    id: str
    name: str
    price: float
    quantity: int
    stock: int
    subtotal: float
    image_url: str | None = None
    category_name: str | None = None
    subcategory_name: str | None = None


class CartOut(BaseModel):
    items: list[CartItemOut]
    is_open: bool
    total_items: int
    total_amount: float
    badge: str | None = None


class CartChangeOut(BaseModel):
    changed: bool
    cart: CartOut


class CheckoutOut(BaseModel):
    message: str
    url: str


class ServiceRequestIn(BaseModel):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    location: str = Field(min_length=1)
    equipment_type: str = Field(min_length=1)
    equipment_other: str | None = None
    problem: str = Field(min_length=1)
    urgency: Literal["low", "medium", "high"] = "medium"
    email: str | None = None
    brand: str | None = None
    model: str | None = None


def badge_text(total_items: int) -> str | None:
    """Floating cart button badge."""
    if total_items <= 0:
        return None
    return f"{CART_BADGE_LIMIT}+" if total_items > CART_BADGE_LIMIT else str(total_items)


def cart_out(state: CartState) -> CartOut:
    return CartOut(
        items=[
            CartItemOut(
                id=item.id,
                name=item.name,
                price=item.price,
                quantity=item.quantity,
                stock=item.stock,
                subtotal=item.subtotal,
                image_url=item.image_url,
                category_name=item.category_name,
                subcategory_name=item.subcategory_name,
            )
            for item in state.items
        ],
        is_open=state.is_open,
        total_items=state.total_items,
        total_amount=state.total_amount,
        badge=badge_text(state.total_items),
    )


def change_out(changed: bool, store: CartStore) -> CartChangeOut:
    return CartChangeOut(changed=changed, cart=cart_out(store.state))
