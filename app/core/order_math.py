"""Shared helpers for cart totals and quantities."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol


class _Priced(Protocol):
    price: float
    quantity: int


def calc_line_subtotal(price: float, quantity: int) -> float:
    return float(price) * int(quantity)


def calc_total_items(items: Iterable[_Priced]) -> int:
    # Always a full fold; never a running counter
    return sum(int(item.quantity) for item in items)


def calc_total_amount(items: Iterable[_Priced]) -> float:
    return sum((calc_line_subtotal(item.price, item.quantity) for item in items), 0.0)
