"""Domain package."""

from .cart import (
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

__all__ = [
    # State
    "CartLineItem",
    "CartState",
    "reduce_cart",
    # Commands
    "CartCommand",
    "AddItem",
    "RemoveItem",
    "SetQuantity",
    "ClearCart",
    "OpenCart",
    "CloseCart",
    "ToggleCart",
    "LoadCart",
]
