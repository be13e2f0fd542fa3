"""
FastAPI server for the storefront cart.

Serves the cart presenters (sidebar, cart page, floating button) and the
WhatsApp hand-off links.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.api.cart import CartSessionRegistry
from app.api.cart import router as cart_router
from app.api.rate_limit import build_limiter
from app.core.cart_storage import build_cart_storage
from app.core.config import Settings, load_settings
from app.core.constants import CART_SESSION_HEADER
from app.integrations.cart_storage_port import CartStoragePort

logger = logging.getLogger(__name__)


def create_api_app(
    settings: Settings | None = None, storage: CartStoragePort | None = None
) -> FastAPI:
    """
    Create FastAPI application for the storefront.

    Args:
        settings: Loaded settings; read from the environment when omitted
        storage: Cart storage port; chosen from settings when omitted
    """
    settings = settings or load_settings()
    storage = storage or build_cart_storage(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 Storefront API starting...")
        yield
        logger.info("👋 Storefront API shutting down (%d cart sessions)", len(app.state.cart_registry))
        app.state.cart_registry.close()

    app = FastAPI(
        title="LusoInsumos Storefront API",
        description="Cart and WhatsApp checkout for the LusoInsumos storefront",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.state.settings = settings
    app.state.cart_registry = CartSessionRegistry(
        storage, settings.cart.storage_key, max_sessions=settings.cart.max_sessions
    )

    # Add rate limiter
    app.state.limiter = build_limiter()
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    allow_all = "*" in settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_origins,
        # Browsers reject credentialed requests against a wildcard origin
        allow_credentials=not allow_all,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", CART_SESSION_HEADER],
        expose_headers=[CART_SESSION_HEADER],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    app.include_router(cart_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
