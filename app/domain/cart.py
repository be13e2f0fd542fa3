"""Cart line items, cart state and the pure cart reducer."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Union

from app.core.exceptions import ValidationException
from app.core.order_math import calc_line_subtotal, calc_total_amount, calc_total_items


def _get(obj: Any, key: str, default: Any = None) -> Any:
    """Universal getter for dict or object attributes."""
    if isinstance(obj, Mapping):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value)
    return value or None


def _item_id(value: Any) -> str:
    if value is None or str(value) == "":
        raise ValidationException("cart entry has an empty id")
    return str(value)


def _item_price(value: Any, item_id: str) -> float:
    price = float(value)
    if price != price or price < 0:  # NaN or negative
        raise ValidationException(f"invalid price for cart entry {item_id}: {value!r}")
    return price


@dataclass(frozen=True, slots=True)
class CartLineItem:
    """Single product entry in the cart.

    Descriptive fields and ``stock`` are snapshots taken when the product was
    added; they are never re-fetched.
    """

    id: str
    name: str
    price: float
    quantity: int
    stock: int
    image_url: str | None = None
    category_name: str | None = None
    subcategory_name: str | None = None

    @property
    def subtotal(self) -> float:
        return calc_line_subtotal(self.price, self.quantity)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "stock": self.stock,
        }
        for key in ("image_url", "category_name", "subcategory_name"):
            value = getattr(self, key)
            if value:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CartLineItem:
        """Parse a stored entry; raises on missing or unconvertible fields."""
        if not isinstance(data, Mapping):
            raise TypeError(f"cart entry must be an object, got {type(data).__name__}")
        item_id = _item_id(data["id"])
        return cls(
            id=item_id,
            name=str(data["name"]),
            price=_item_price(data["price"], item_id),
            quantity=int(data["quantity"]),
            stock=int(data["stock"]),
            image_url=_optional_str(data.get("image_url")),
            category_name=_optional_str(data.get("category_name")),
            subcategory_name=_optional_str(data.get("subcategory_name")),
        )

    @classmethod
    def from_product(cls, product: Any) -> CartLineItem:
        """New line item with quantity 1 from an upstream catalog product.

        Raises :class:`ValidationException` for the same ids and prices that
        :meth:`from_dict` rejects, so every item in a cart can be reloaded.
        """
        item_id = _item_id(_get(product, "id"))
        return cls(
            id=item_id,
            name=str(_get(product, "name", "")),
            price=_item_price(_get(product, "price", 0) or 0, item_id),
            quantity=1,
            stock=int(_get(product, "stock", 0) or 0),
            image_url=_optional_str(_get(product, "image_url")),
            category_name=_optional_str(_get(product, "category_name")),
            subcategory_name=_optional_str(_get(product, "subcategory_name")),
        )


@dataclass(frozen=True, slots=True)
class CartState:
    items: tuple[CartLineItem, ...] = ()
    is_open: bool = False
    total_items: int = 0
    total_amount: float = 0.0

    @classmethod
    def empty(cls) -> CartState:
        return cls()

    @classmethod
    def from_items(cls, items: Iterable[CartLineItem], is_open: bool = False) -> CartState:
        items = tuple(items)
        return cls(
            items=items,
            is_open=is_open,
            total_items=calc_total_items(items),
            total_amount=calc_total_amount(items),
        )

    def with_items(self, items: Iterable[CartLineItem]) -> CartState:
        return CartState.from_items(items, is_open=self.is_open)

    def find(self, item_id: str) -> CartLineItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "is_open": self.is_open,
            "total_items": self.total_items,
            "total_amount": self.total_amount,
        }


# =============================================================================
# Commands
# =============================================================================


@dataclass(frozen=True, slots=True)
class AddItem:
    product: Any


@dataclass(frozen=True, slots=True)
class RemoveItem:
    item_id: str


@dataclass(frozen=True, slots=True)
class SetQuantity:
    item_id: str
    quantity: int


@dataclass(frozen=True, slots=True)
class ClearCart:
    pass


@dataclass(frozen=True, slots=True)
class OpenCart:
    pass


@dataclass(frozen=True, slots=True)
class CloseCart:
    pass


@dataclass(frozen=True, slots=True)
class ToggleCart:
    pass


@dataclass(frozen=True, slots=True)
class LoadCart:
    items: tuple[CartLineItem, ...] = field(default_factory=tuple)


CartCommand = Union[
    AddItem, RemoveItem, SetQuantity, ClearCart, OpenCart, CloseCart, ToggleCart, LoadCart
]


def _clamp(quantity: int, stock: int) -> int:
    return max(0, min(int(quantity), int(stock)))


def _normalize_loaded(items: Iterable[CartLineItem]) -> list[CartLineItem]:
    seen: set[str] = set()
    result: list[CartLineItem] = []
    for item in items:
        if item.id in seen:
            continue
        quantity = _clamp(item.quantity, item.stock)
        if quantity < 1:
            continue
        seen.add(item.id)
        result.append(item if quantity == item.quantity else replace(item, quantity=quantity))
    return result


def _add(state: CartState, product: Any) -> CartState:
    raw_id = _get(product, "id")
    if raw_id is None or str(raw_id) == "":
        return state
    item_id = str(raw_id)
    existing = state.find(item_id)
    if existing is not None:
        quantity = min(existing.quantity + 1, existing.stock)
        if quantity == existing.quantity:
            return state
        items = [replace(item, quantity=quantity) if item.id == item_id else item for item in state.items]
        return state.with_items(items)

    try:
        new_item = CartLineItem.from_product(product)
    except (TypeError, ValueError):
        return state
    if new_item.stock < 1:
        return state
    return state.with_items([*state.items, new_item])


def _set_quantity(state: CartState, item_id: str, quantity: int) -> CartState:
    existing = state.find(item_id)
    if existing is None:
        return state
    clamped = _clamp(quantity, existing.stock)
    if clamped == existing.quantity:
        return state
    if clamped < 1:
        return state.with_items(item for item in state.items if item.id != item_id)
    return state.with_items(
        replace(item, quantity=clamped) if item.id == item_id else item for item in state.items
    )


def reduce_cart(state: CartState, command: CartCommand) -> CartState:
    """Apply one command to ``state`` and return the resulting state.

    Pure: the input is never mutated and the same instance is returned when
    the command has no effect. Totals are recomputed from ``items`` on every
    change.
    """
    if isinstance(command, AddItem):
        return _add(state, command.product)
    if isinstance(command, RemoveItem):
        if state.find(command.item_id) is None:
            return state
        return state.with_items(item for item in state.items if item.id != command.item_id)
    if isinstance(command, SetQuantity):
        return _set_quantity(state, command.item_id, command.quantity)
    if isinstance(command, ClearCart):
        if not state.items:
            return state
        return state.with_items(())
    if isinstance(command, OpenCart):
        return state if state.is_open else replace(state, is_open=True)
    if isinstance(command, CloseCart):
        return replace(state, is_open=False) if state.is_open else state
    if isinstance(command, ToggleCart):
        return replace(state, is_open=not state.is_open)
    if isinstance(command, LoadCart):
        return state.with_items(_normalize_loaded(command.items))
    return state
