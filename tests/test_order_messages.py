"""Tests for hand-off message builders."""
from __future__ import annotations

from urllib.parse import unquote

from app.domain.cart import CartLineItem, CartState
from app.interfaces.presenters.order_messages import (
    ServiceRequest,
    build_whatsapp_url,
    encode_uri_component,
    format_order_message,
    format_service_request_message,
    render_order_message,
    render_service_request_message,
)


def _state(*items: CartLineItem) -> CartState:
    return CartState.from_items(items)


HDMI_X2 = CartLineItem(id="7", name="Cable HDMI", price=10.0, quantity=2, stock=5)
TONER = CartLineItem(id="3", name="Tóner & tinta", price=12.5, quantity=1, stock=2)


class TestOrderMessage:
    def test_empty_cart_formats_to_empty_string(self) -> None:
        assert format_order_message(CartState.empty()) == ""
        assert render_order_message(CartState.empty()) == ""

    def test_single_item_contents(self) -> None:
        text = render_order_message(_state(HDMI_X2))

        assert "1. Cable HDMI" in text
        assert "Cantidad: 2" in text
        assert "$10.00" in text
        assert "Subtotal: $20.00" in text
        assert "TOTAL: $20.00" in text
        assert text.startswith("¡Hola!")
        assert text.endswith("¡Espero su confirmación! 😊")

    def test_items_appear_once_in_cart_order(self) -> None:
        text = render_order_message(_state(TONER, HDMI_X2))

        assert text.count("Cable HDMI") == 1
        assert text.count("Tóner & tinta") == 1
        assert text.index("1. Tóner & tinta") < text.index("2. Cable HDMI")
        assert "TOTAL: $32.50" in text

    def test_encoded_message_is_url_safe(self) -> None:
        encoded = format_order_message(_state(TONER, HDMI_X2))

        assert " " not in encoded
        assert "\n" not in encoded
        assert "&" not in encoded
        assert "%20" in encoded
        assert "%0A" in encoded
        assert unquote(encoded) == render_order_message(_state(TONER, HDMI_X2))

    def test_english_copy(self) -> None:
        text = render_order_message(_state(HDMI_X2), lang="en")

        assert text.startswith("Hi!")
        assert "Quantity: 2" in text

    def test_unknown_language_falls_back_to_spanish(self) -> None:
        assert "Cantidad: 2" in render_order_message(_state(HDMI_X2), lang="fr")


class TestWhatsAppUrl:
    def test_builds_deep_link(self) -> None:
        url = build_whatsapp_url("hola%20mundo", "5493417410787")

        assert url == "https://wa.me/5493417410787?text=hola%20mundo"

    def test_missing_number_uses_placeholder(self) -> None:
        assert build_whatsapp_url("x", None) == "https://wa.me/1234567890?text=x"
        assert build_whatsapp_url("x", "  ") == "https://wa.me/1234567890?text=x"


def test_encode_uri_component_matches_javascript_safe_set() -> None:
    assert encode_uri_component("a b!'()*~-_.") == "a%20b!'()*~-_."
    assert encode_uri_component("ñ/?") == "%C3%B1%2F%3F"


class TestServiceRequest:
    def _request(self, **overrides) -> ServiceRequest:
        data = {
            "name": "Ana",
            "phone": "3415550000",
            "location": "Rosario",
            "equipment_type": "Impresora",
            "problem": "No imprime",
            "urgency": "high",
        }
        data.update(overrides)
        return ServiceRequest(**data)

    def test_contains_sections(self) -> None:
        text = render_service_request_message(self._request(brand="Epson"))

        assert text.startswith("*SOLICITUD DE SERVICIO TECNICO*")
        assert "*URGENCIA:* ALTA (Equipo sin funcionar)" in text
        assert "- Nombre: Ana" in text
        assert "- Marca: Epson" in text
        assert "No imprime" in text
        assert text.endswith("Solicitud generada desde LusoInsumos")

    def test_blank_optional_fields_are_omitted(self) -> None:
        text = render_service_request_message(self._request(email="  ", model=None))

        assert "Email" not in text
        assert "Modelo" not in text

    def test_unknown_urgency_defaults_to_medium(self) -> None:
        text = render_service_request_message(self._request(urgency="asap"))

        assert "MEDIA" in text

    def test_encoded(self) -> None:
        encoded = format_service_request_message(self._request())

        assert unquote(encoded) == render_service_request_message(self._request())
