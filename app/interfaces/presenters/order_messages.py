"""Hand-off message builders (WhatsApp deep links)."""
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from app.core.constants import (
    MESSAGE_DIVIDER_WIDTH,
    WHATSAPP_BASE_URL,
    WHATSAPP_PLACEHOLDER_NUMBER,
)
from app.core.i18n import _
from app.domain.cart import CartState

# Characters encodeURIComponent leaves as-is
_URI_COMPONENT_SAFE = "-_.!~*'()"

DIVIDER = "\n" + "─" * MESSAGE_DIVIDER_WIDTH + "\n"

URGENCY_LEVELS = ("low", "medium", "high")


def encode_uri_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def _money(value: float) -> str:
    return f"{value:.2f}"


def render_order_message(state: CartState, lang: str = "es") -> str:
    """Plain-text order summary; empty cart gives an empty string."""
    if not state.items:
        return ""

    blocks = []
    for index, item in enumerate(state.items, start=1):
        blocks.append(
            f"{index}. {item.name}\n"
            + _("order_item_quantity", lang=lang, quantity=item.quantity)
            + "\n"
            + _("order_item_price", lang=lang, price=_money(item.price))
            + "\n"
            + _("order_item_subtotal", lang=lang, subtotal=_money(item.price * item.quantity))
            + "\n"
        )

    greeting = _("order_greeting", lang=lang)
    total = DIVIDER + _("order_total", lang=lang, total=_money(state.total_amount))
    footer = "\n" + DIVIDER + _("order_signoff", lang=lang)
    return greeting + DIVIDER + "\n".join(blocks) + total + footer


def format_order_message(state: CartState, lang: str = "es") -> str:
    """Percent-encoded order summary ready for a ``?text=`` parameter."""
    message = render_order_message(state, lang=lang)
    return encode_uri_component(message) if message else ""


def build_whatsapp_url(encoded_message: str, phone_number: str | None = None) -> str:
    phone = (phone_number or "").strip() or WHATSAPP_PLACEHOLDER_NUMBER
    return f"{WHATSAPP_BASE_URL}/{phone}?text={encoded_message}"


@dataclass(slots=True)
class ServiceRequest:
    name: str
    phone: str
    location: str
    equipment_type: str
    problem: str
    urgency: str = "medium"
    email: str | None = None
    brand: str | None = None
    model: str | None = None


def render_service_request_message(request: ServiceRequest, lang: str = "es") -> str:
    urgency = request.urgency if request.urgency in URGENCY_LEVELS else "medium"
    label = _(f"urgency_{urgency}", lang=lang).upper()
    description = _(f"urgency_{urgency}_desc", lang=lang)

    def _optional(key: str, value: str | None) -> list[str]:
        value = (value or "").strip()
        return [_(key, lang=lang, value=value)] if value else []

    lines = [
        _("service_title", lang=lang),
        "",
        _("service_urgency", lang=lang, label=label, description=description),
        "",
        _("service_customer", lang=lang),
        _("service_name", lang=lang, value=request.name.strip()),
        _("service_phone", lang=lang, value=request.phone.strip()),
        *_optional("service_email", request.email),
        _("service_location", lang=lang, value=request.location.strip()),
        "",
        _("service_equipment", lang=lang),
        _("service_type", lang=lang, value=request.equipment_type.strip()),
        *_optional("service_brand", request.brand),
        *_optional("service_model", request.model),
        "",
        _("service_problem", lang=lang),
        request.problem.strip(),
        "",
        "---",
        _("service_footer", lang=lang),
    ]
    return "\n".join(lines)


def format_service_request_message(request: ServiceRequest, lang: str = "es") -> str:
    return encode_uri_component(render_service_request_message(request, lang=lang))
