"""
Message copy for customer-facing hand-off texts.

Supports Spanish (es, default) and English (en).

Usage:
    from app.core.i18n import _

    greeting = _("order_greeting", lang="es")
    line = _("order_item_quantity", lang="en", quantity=2)
"""
from __future__ import annotations

from typing import Any

DEFAULT_LANGUAGE = "es"

SUPPORTED_LANGUAGES = ("es", "en")

TEXTS: dict[str, dict[str, str]] = {
    "es": {
        "order_greeting": "¡Hola! Me gustaría hacer el siguiente pedido:",
        "order_item_quantity": "   Cantidad: {quantity}",
        "order_item_price": "   Precio unitario: ${price}",
        "order_item_subtotal": "   Subtotal: ${subtotal}",
        "order_total": "TOTAL: ${total}",
        "order_signoff": "¡Espero su confirmación! 😊",
        "service_title": "*SOLICITUD DE SERVICIO TECNICO*",
        "service_urgency": "*URGENCIA:* {label} ({description})",
        "service_customer": "*DATOS DEL CLIENTE*",
        "service_name": "- Nombre: {value}",
        "service_phone": "- Telefono: {value}",
        "service_email": "- Email: {value}",
        "service_location": "- Ubicacion: {value}",
        "service_equipment": "*EQUIPO*",
        "service_type": "- Tipo: {value}",
        "service_brand": "- Marca: {value}",
        "service_model": "- Modelo: {value}",
        "service_problem": "*PROBLEMA REPORTADO*",
        "service_footer": "Solicitud generada desde LusoInsumos",
        "urgency_low": "Baja",
        "urgency_low_desc": "Puede esperar unos días",
        "urgency_medium": "Media",
        "urgency_medium_desc": "Necesito solución pronto",
        "urgency_high": "Alta",
        "urgency_high_desc": "Equipo sin funcionar",
    },
    "en": {
        "order_greeting": "Hi! I would like to place the following order:",
        "order_item_quantity": "   Quantity: {quantity}",
        "order_item_price": "   Unit price: ${price}",
        "order_item_subtotal": "   Subtotal: ${subtotal}",
        "order_total": "TOTAL: ${total}",
        "order_signoff": "Looking forward to your confirmation! 😊",
        "service_title": "*TECHNICAL SERVICE REQUEST*",
        "service_urgency": "*URGENCY:* {label} ({description})",
        "service_customer": "*CUSTOMER DETAILS*",
        "service_name": "- Name: {value}",
        "service_phone": "- Phone: {value}",
        "service_email": "- Email: {value}",
        "service_location": "- Location: {value}",
        "service_equipment": "*EQUIPMENT*",
        "service_type": "- Type: {value}",
        "service_brand": "- Brand: {value}",
        "service_model": "- Model: {value}",
        "service_problem": "*REPORTED PROBLEM*",
        "service_footer": "Request sent from LusoInsumos",
        "urgency_low": "Low",
        "urgency_low_desc": "Can wait a few days",
        "urgency_medium": "Medium",
        "urgency_medium_desc": "Need a fix soon",
        "urgency_high": "High",
        "urgency_high_desc": "Equipment not working",
    },
}


def normalize_language(lang: str | None) -> str:
    language = (lang or DEFAULT_LANGUAGE).strip().lower()
    return language if language in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def translate(key: str, lang: str | None = None, **kwargs: Any) -> str:
    """
    Translate a message key to the requested language.

    Falls back to the default language, then to the key itself.
    """
    language = normalize_language(lang)
    translated = TEXTS[language].get(key) or TEXTS[DEFAULT_LANGUAGE].get(key) or key

    if kwargs:
        try:
            translated = translated.format(**kwargs)
        except (KeyError, ValueError):
            pass

    return translated


# Shorthand alias
_ = translate
