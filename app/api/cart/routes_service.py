from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.core.config import Settings
from app.interfaces.presenters.order_messages import (
    ServiceRequest,
    build_whatsapp_url,
    format_service_request_message,
)

from .common import CheckoutOut, ServiceRequestIn, get_settings

router = APIRouter(tags=["service"])

_OTHER_EQUIPMENT = {"otro", "other"}


@router.post("/service-request", response_model=CheckoutOut)
def create_service_request(
    body: ServiceRequestIn,
    lang: str | None = Query(None, max_length=5),
    settings: Settings = Depends(get_settings),
):
    """Technical-service request handed off to WhatsApp."""
    equipment = body.equipment_type
    if equipment.strip().lower() in _OTHER_EQUIPMENT and body.equipment_other:
        equipment = body.equipment_other

    request = ServiceRequest(
        name=body.name,
        phone=body.phone,
        location=body.location,
        equipment_type=equipment,
        problem=body.problem,
        urgency=body.urgency,
        email=body.email,
        brand=body.brand,
        model=body.model,
    )
    message = format_service_request_message(request, lang=lang or settings.message_lang)
    return CheckoutOut(message=message, url=build_whatsapp_url(message, settings.whatsapp_number))
