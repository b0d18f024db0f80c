"""Builders para localização e solicitação de endereço."""

from __future__ import annotations

from typing import Any, Literal

from app.constants.whatsapp import MessageType

from .base import build_base_payload


def build_location_payload(
    to: str,
    latitude: float,
    longitude: float,
    name: str | None = None,
    address: str | None = None,
) -> dict[str, Any]:
    """Constrói payload de localização.

    Raises:
        ValueError: Se coordenadas fora do intervalo válido
    """
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise ValueError("Coordenadas inválidas")

    location: dict[str, Any] = {"latitude": latitude, "longitude": longitude}
    if name:
        location["name"] = name
    if address:
        location["address"] = address

    payload = build_base_payload(to, MessageType.LOCATION)
    payload["location"] = location
    return payload


def build_address_request_payload(
    to: str,
    request_type: Literal["HOME", "WORK"] = "HOME",
    button_text: str = "Send Address",
) -> dict[str, Any]:
    payload = build_base_payload(to, MessageType.ADDRESS)
    payload["address"] = {
        "request_address": {
            "type": request_type,
            "button_text": button_text,
        }
    }
    return payload
