"""
Async client for the storefront backend REST API.

Covers the public catalog (products, categories, slides) and the admin
back-office (CRUD plus token authentication).
"""
from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import aiohttp

from app.core.constants import API_TIMEOUT_SECONDS, FEATURED_PRODUCTS_LIMIT
from app.core.exceptions import ApiException, AuthenticationException
from app.domain.catalog import Category, Product, ProductsPage, Slide, Subcategory, User

logger = logging.getLogger(__name__)

_AUTH_ERROR_MARKERS = ("Token inválido", "Token de acceso requerido")


@dataclass(slots=True)
class UploadFile:
    field: str
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


def is_auth_error(exc: BaseException) -> bool:
    """True when the backend rejected the admin token."""
    if isinstance(exc, AuthenticationException):
        return True
    message = getattr(exc, "message", None) or str(exc)
    return any(marker in message for marker in _AUTH_ERROR_MARKERS)


def build_form(fields: Mapping[str, Any], files: Iterable[UploadFile] = ()) -> aiohttp.FormData:
    form = aiohttp.FormData(default_to_multipart=True)
    for name, value in fields.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        form.add_field(name, str(value))
    for upload in files:
        form.add_field(
            upload.field,
            upload.content,
            filename=upload.filename,
            content_type=upload.content_type,
        )
    return form


def product_query_params(
    page: int | None = None,
    limit: int | None = None,
    search: str | None = None,
    category: str | None = None,
    subcategory: str | None = None,
    stock_filter: str | None = None,
    sort_by: str | None = None,
    sort_direction: str | None = None,
) -> dict[str, str]:
    """Map storefront filter names to the backend's query parameters."""
    params: dict[str, str] = {}
    if page:
        params["page"] = str(page)
    if limit:
        params["limit"] = str(limit)
    if search:
        params["search"] = search
    if category:
        params["category"] = category
    if subcategory:
        params["subcategory"] = subcategory
    if stock_filter:
        params["stock_filter"] = stock_filter
    if sort_by:
        params["orderBy"] = sort_by
    if sort_direction:
        params["orderDirection"] = sort_direction.upper()
    return params


class CatalogApiClient:
    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = API_TIMEOUT_SECONDS,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def token(self) -> str | None:
        return self._token

    @token.setter
    def token(self, value: str | None) -> None:
        self._token = value or None

    def _headers(self, json_body: bool) -> dict[str, str]:
        headers: dict[str, str] = {}
        if json_body:
            headers["Content-Type"] = "application/json"
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Any = None,
        params: Mapping[str, str] | None = None,
        form: aiohttp.FormData | None = None,
    ) -> dict[str, Any]:
        url = f"{self._base_url}{endpoint}"
        headers = self._headers(json_body=form is None)
        data: Any = form if form is not None else (json.dumps(payload) if payload is not None else None)

        try:
            async with aiohttp.ClientSession(headers=headers, timeout=self._timeout) as session:
                async with session.request(method, url, params=params, data=data) as resp:
                    try:
                        body = await resp.json(content_type=None)
                    except ValueError:
                        body = None
                    if not isinstance(body, dict):
                        body = {}
                    if resp.status >= 400:
                        message = body.get("message") or f"Error {resp.status}"
                        if resp.status == 401:
                            raise AuthenticationException(message, status=resp.status)
                        raise ApiException(message, status=resp.status)
                    return body
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.error("API Error %s %s: %s", method, url, exc)
            raise ApiException(f"Request to {endpoint} failed: {exc}") from exc

    # Auth -----------------------------------------------------------------

    async def login(self, email: str, password: str) -> dict[str, Any]:
        result = await self._request("POST", "/auth/login", payload={"email": email, "password": password})
        data = result.get("data") or {}
        if isinstance(data, dict) and data.get("token"):
            self._token = str(data["token"])
        return result

    async def get_me(self) -> dict[str, Any]:
        return await self._request("GET", "/auth/me")

    async def logout(self) -> dict[str, Any]:
        try:
            return await self._request("POST", "/auth/logout")
        finally:
            self._token = None

    # Products -------------------------------------------------------------

    async def list_products(self, **filters: Any) -> dict[str, Any]:
        return await self._request("GET", "/products", params=product_query_params(**filters))

    async def get_product(self, product_id: int | str) -> dict[str, Any]:
        return await self._request("GET", f"/products/{product_id}")

    async def create_product(
        self, fields: Mapping[str, Any], images: Iterable[UploadFile] = ()
    ) -> dict[str, Any]:
        return await self._request("POST", "/products", form=build_form(fields, images))

    async def update_product(
        self, product_id: int | str, fields: Mapping[str, Any], images: Iterable[UploadFile] = ()
    ) -> dict[str, Any]:
        return await self._request("PUT", f"/products/{product_id}", form=build_form(fields, images))

    async def delete_product(self, product_id: int | str) -> dict[str, Any]:
        return await self._request("DELETE", f"/products/{product_id}")

    async def get_featured(self, limit: int | None = None) -> dict[str, Any]:
        params = {"limit": str(limit)} if limit else None
        return await self._request("GET", "/products/featured", params=params)

    # Slides ---------------------------------------------------------------

    async def list_slides(self) -> dict[str, Any]:
        return await self._request("GET", "/slides")

    async def list_active_slides(self) -> dict[str, Any]:
        return await self._request("GET", "/slides/active")

    async def get_slide(self, slide_id: int | str) -> dict[str, Any]:
        return await self._request("GET", f"/slides/{slide_id}")

    async def create_slide(self, fields: Mapping[str, Any], image: UploadFile | None = None) -> dict[str, Any]:
        return await self._request("POST", "/slides", form=build_form(fields, [image] if image else []))

    async def update_slide(
        self, slide_id: int | str, fields: Mapping[str, Any], image: UploadFile | None = None
    ) -> dict[str, Any]:
        return await self._request(
            "PUT", f"/slides/{slide_id}", form=build_form(fields, [image] if image else [])
        )

    async def delete_slide(self, slide_id: int | str) -> dict[str, Any]:
        return await self._request("DELETE", f"/slides/{slide_id}")

    async def reorder_slides(self, order: Iterable[tuple[int, int]]) -> dict[str, Any]:
        slides = [{"id": slide_id, "sort_order": sort_order} for slide_id, sort_order in order]
        return await self._request("PUT", "/slides/reorder", payload={"slides": slides})

    # Categories -----------------------------------------------------------

    async def list_categories(self) -> dict[str, Any]:
        return await self._request("GET", "/categories")

    async def get_category(self, category_id: int | str) -> dict[str, Any]:
        return await self._request("GET", f"/categories/{category_id}")

    async def create_category(self, name: str, description: str | None = None) -> dict[str, Any]:
        return await self._request("POST", "/categories", payload=_named(name, description))

    async def update_category(
        self, category_id: int | str, name: str, description: str | None = None
    ) -> dict[str, Any]:
        return await self._request("PUT", f"/categories/{category_id}", payload=_named(name, description))

    async def delete_category(self, category_id: int | str) -> dict[str, Any]:
        return await self._request("DELETE", f"/categories/{category_id}")

    async def list_category_subcategories(self, category_id: int | str) -> dict[str, Any]:
        return await self._request("GET", f"/categories/{category_id}/subcategories")

    # Subcategories --------------------------------------------------------

    async def list_subcategories(self) -> dict[str, Any]:
        return await self._request("GET", "/subcategories")

    async def get_subcategory(self, subcategory_id: int | str) -> dict[str, Any]:
        return await self._request("GET", f"/subcategories/{subcategory_id}")

    async def create_subcategory(
        self, name: str, category_id: int, description: str | None = None
    ) -> dict[str, Any]:
        payload = {**_named(name, description), "category_id": category_id}
        return await self._request("POST", "/subcategories", payload=payload)

    async def update_subcategory(
        self, subcategory_id: int | str, name: str, category_id: int, description: str | None = None
    ) -> dict[str, Any]:
        payload = {**_named(name, description), "category_id": category_id}
        return await self._request("PUT", f"/subcategories/{subcategory_id}", payload=payload)

    async def delete_subcategory(self, subcategory_id: int | str) -> dict[str, Any]:
        return await self._request("DELETE", f"/subcategories/{subcategory_id}")

    # Users (superadmin only) ----------------------------------------------

    async def list_users(self) -> dict[str, Any]:
        return await self._request("GET", "/users")

    async def get_user(self, user_id: int | str) -> dict[str, Any]:
        return await self._request("GET", f"/users/{user_id}")

    async def create_user(
        self, name: str, email: str, password: str, role: str | None = None
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": name, "email": email, "password": password}
        if role:
            payload["role"] = role
        return await self._request("POST", "/users", payload=payload)

    async def update_user(
        self, user_id: int, name: str, email: str, role: str | None = None
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": name, "email": email}
        if role:
            payload["role"] = role
        return await self._request("PUT", f"/users/{user_id}", payload=payload)

    async def delete_user(self, user_id: int) -> dict[str, Any]:
        return await self._request("DELETE", f"/users/{user_id}")

    # Typed helpers --------------------------------------------------------

    async def fetch_products_page(self, **filters: Any) -> ProductsPage:
        result = await self.list_products(**filters)
        return ProductsPage.model_validate(result.get("data") or {})

    async def fetch_featured_products(self, limit: int = FEATURED_PRODUCTS_LIMIT) -> list[Product]:
        result = await self.get_featured(limit)
        return [Product.model_validate(raw) for raw in _as_list(result.get("data"), "products")]

    async def fetch_active_slides(self) -> list[Slide]:
        result = await self.list_active_slides()
        return [Slide.model_validate(raw) for raw in _as_list(result.get("data"), "slides")]

    async def fetch_categories(self) -> list[Category]:
        result = await self.list_categories()
        return [Category.model_validate(raw) for raw in _as_list(result.get("data"), "categories")]

    async def fetch_subcategories(self, category_id: int | str) -> list[Subcategory]:
        result = await self.list_category_subcategories(category_id)
        return [
            Subcategory.model_validate(raw) for raw in _as_list(result.get("data"), "subcategories")
        ]

    async def fetch_users(self) -> list[User]:
        result = await self.list_users()
        return [User.model_validate(raw) for raw in _as_list(result.get("data"), "users")]


def _named(name: str, description: str | None) -> dict[str, Any]:
    payload: dict[str, Any] = {"name": name}
    if description:
        payload["description"] = description
    return payload


def _as_list(data: Any, key: str) -> list[Any]:
    """Backend wraps lists either bare or as ``{key: [...]}``."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    return []
