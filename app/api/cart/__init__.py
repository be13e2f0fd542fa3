from __future__ import annotations

from fastapi import APIRouter

from . import routes_cart, routes_service
from .common import CartSessionRegistry

router = APIRouter(prefix="/api/v1")

router.include_router(routes_cart.router)
router.include_router(routes_service.router)

__all__ = ["CartSessionRegistry", "router"]
