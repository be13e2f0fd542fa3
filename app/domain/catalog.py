"""Catalog models mirroring the storefront backend, plus display helpers."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.core.constants import DEFAULT_CATEGORY_NAME, PLACEHOLDER_IMAGE_URL


class ProductImage(BaseModel):
    id: int
    product_id: int
    image_url: str
    is_primary: bool = False
    sort_order: int = 0
    created_at: datetime | None = None


class Product(BaseModel):
    id: int
    name: str
    description: str = ""
    price: float
    stock: int = 0
    image_url: str | None = None
    category_id: int | None = None
    subcategory_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    category_name: str | None = None
    subcategory_name: str | None = None
    images: list[ProductImage] = Field(default_factory=list)


class Category(BaseModel):
    id: int
    name: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Subcategory(BaseModel):
    id: int
    name: str
    description: str | None = None
    category_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Slide(BaseModel):
    id: int
    title: str | None = None
    subtitle: str | None = None
    image_url: str
    link: str | None = None
    is_active: bool = True
    show_title: bool | None = None
    show_subtitle: bool | None = None
    sort_order: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class User(BaseModel):
    id: int
    name: str
    email: str
    role: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PaginationData(BaseModel):
    current_page: int = 1
    total_pages: int = 1
    total_items: int = 0
    items_per_page: int = 0


class ProductsPage(BaseModel):
    products: list[Product] = Field(default_factory=list)
    pagination: PaginationData = Field(default_factory=PaginationData)


class ProductDisplay(BaseModel):
    id: str
    name: str
    description: str
    price: float
    image: str
    images: list[str] = Field(default_factory=list)
    category: str
    in_stock: bool
    is_feature: bool = False


class HeaderSlide(BaseModel):
    id: str
    image: str
    title: str | None = None
    subtitle: str | None = None
    link: str | None = None
    show_title: bool = True
    show_subtitle: bool = True


def backend_origin(api_url: str) -> str:
    """``http://host:3006/api`` -> ``http://host:3006``."""
    base = api_url.rstrip("/")
    if base.endswith("/api"):
        base = base[: -len("/api")]
    return base


def get_image_url(image_path: str | None, api_url: str) -> str:
    """Absolute URL for a stored image path, placeholder when missing."""
    if not image_path:
        return PLACEHOLDER_IMAGE_URL
    if image_path.startswith("http"):
        return image_path
    base = backend_origin(api_url)
    if image_path.startswith("/"):
        return f"{base}{image_path}"
    return f"{base}/{image_path}"


def product_to_display(product: Product, api_url: str, featured: bool = False) -> ProductDisplay:
    primary = product.image_url or (product.images[0].image_url if product.images else None)

    if product.images:
        gallery = [get_image_url(img.image_url, api_url) for img in product.images]
    elif product.image_url:
        gallery = [get_image_url(product.image_url, api_url)]
    else:
        gallery = []

    return ProductDisplay(
        id=str(product.id),
        name=product.name,
        description=product.description,
        price=product.price,
        image=get_image_url(primary, api_url),
        images=gallery,
        category=product.category_name or DEFAULT_CATEGORY_NAME,
        in_stock=product.stock > 0,
        is_feature=featured,
    )


def slide_to_header(slide: Slide, api_url: str) -> HeaderSlide:
    return HeaderSlide(
        id=str(slide.id),
        image=get_image_url(slide.image_url, api_url),
        title=slide.title or None,
        subtitle=slide.subtitle or None,
        link=slide.link or None,
        show_title=True if slide.show_title is None else bool(slide.show_title),
        show_subtitle=True if slide.show_subtitle is None else bool(slide.show_subtitle),
    )
