"""Cart store: owns one cart state and applies commands one at a time."""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any

from app.domain.cart import (
    AddItem,
    CartCommand,
    CartLineItem,
    CartState,
    ClearCart,
    CloseCart,
    LoadCart,
    OpenCart,
    RemoveItem,
    SetQuantity,
    ToggleCart,
    reduce_cart,
)

logger = logging.getLogger(__name__)

CartListener = Callable[[CartState, CartState], None]


class CartStore:
    """Single-writer container for :class:`CartState`.

    Commands are applied under a re-entrant lock in the order they are
    issued. Listeners receive ``(previous, current)`` after every command
    that changed the state; a failing listener is logged and skipped.
    """

    def __init__(self, initial: CartState | None = None) -> None:
        self._state = initial or CartState.empty()
        self._lock = threading.RLock()
        self._listeners: list[CartListener] = []

    @property
    def state(self) -> CartState:
        return self._state

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, command: CartCommand) -> CartState:
        with self._lock:
            previous = self._state
            current = reduce_cart(previous, command)
            if current is previous:
                return current
            self._state = current
            self._notify(previous, current)
            return current

    def _notify(self, previous: CartState, current: CartState) -> None:
        for listener in list(self._listeners):
            try:
                listener(previous, current)
            except Exception:
                logger.exception("Cart listener %r failed", listener)

    def _apply(self, command: CartCommand) -> bool:
        with self._lock:
            before = self._state
            return self.dispatch(command) is not before

    # Commands -------------------------------------------------------------

    def add(self, product: Any) -> bool:
        """Add one unit; ``False`` when stock already caps the quantity."""
        return self._apply(AddItem(product))

    def remove(self, item_id: str) -> bool:
        return self._apply(RemoveItem(str(item_id)))

    def set_quantity(self, item_id: str, quantity: int) -> bool:
        return self._apply(SetQuantity(str(item_id), int(quantity)))

    def clear(self) -> bool:
        return self._apply(ClearCart())

    def open(self) -> bool:
        return self._apply(OpenCart())

    def close(self) -> bool:
        return self._apply(CloseCart())

    def toggle(self) -> bool:
        return self._apply(ToggleCart())

    def load(self, items: Iterable[CartLineItem]) -> bool:
        return self._apply(LoadCart(tuple(items)))
