"""Business services orchestrating domain logic."""

from .cart_persistence import CartPersistence, bind_cart_persistence
from .cart_store import CartListener, CartStore

__all__ = [
    "CartListener",
    "CartPersistence",
    "CartStore",
    "bind_cart_persistence",
]
