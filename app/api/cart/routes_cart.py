from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.config import Settings
from app.interfaces.presenters.order_messages import build_whatsapp_url, format_order_message
from app.services.cart_store import CartStore

from .common import (
    CartChangeOut,
    CartOut,
    CheckoutOut,
    ProductIn,
    QuantityIn,
    cart_out,
    change_out,
    get_cart_store,
    get_settings,
    logger,
)

router = APIRouter(tags=["cart"])


@router.get("/cart", response_model=CartOut)
def get_cart(store: CartStore = Depends(get_cart_store)):
    return cart_out(store.state)


@router.post("/cart/items", response_model=CartChangeOut)
def add_cart_item(product: ProductIn, store: CartStore = Depends(get_cart_store)):
    """Add one unit; ``changed`` is false when stock already caps the quantity."""
    changed = store.add(product)
    if not changed:
        logger.info("Add of product %s had no effect (stock limit)", product.id)
    return change_out(changed, store)


@router.put("/cart/items/{item_id}", response_model=CartChangeOut)
def set_cart_item_quantity(
    item_id: str, body: QuantityIn, store: CartStore = Depends(get_cart_store)
):
    return change_out(store.set_quantity(item_id, body.quantity), store)


@router.delete("/cart/items/{item_id}", response_model=CartChangeOut)
def remove_cart_item(item_id: str, store: CartStore = Depends(get_cart_store)):
    return change_out(store.remove(item_id), store)


@router.delete("/cart", response_model=CartChangeOut)
def clear_cart(store: CartStore = Depends(get_cart_store)):
    return change_out(store.clear(), store)


@router.post("/cart/open", response_model=CartChangeOut)
def open_cart(store: CartStore = Depends(get_cart_store)):
    return change_out(store.open(), store)


@router.post("/cart/close", response_model=CartChangeOut)
def close_cart(store: CartStore = Depends(get_cart_store)):
    return change_out(store.close(), store)


@router.post("/cart/toggle", response_model=CartChangeOut)
def toggle_cart(store: CartStore = Depends(get_cart_store)):
    return change_out(store.toggle(), store)


@router.get("/cart/checkout", response_model=CheckoutOut)
def checkout_cart(
    lang: str | None = Query(None, max_length=5),
    store: CartStore = Depends(get_cart_store),
    settings: Settings = Depends(get_settings),
):
    """Build the WhatsApp hand-off link for the current cart."""
    message = format_order_message(store.state, lang=lang or settings.message_lang)
    if not message:
        raise HTTPException(status_code=409, detail="Cart is empty, nothing to send")
    return CheckoutOut(message=message, url=build_whatsapp_url(message, settings.whatsapp_number))
