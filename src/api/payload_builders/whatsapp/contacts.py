"""Builder para mensagens de contato (vCard estruturado)."""

from __future__ import annotations

from typing import Any

from app.constants.whatsapp import MessageType

from .base import build_base_payload


def build_contacts_payload(to: str, contacts: list[dict[str, Any]]) -> dict[str, Any]:
    """Constrói payload de contatos.

    Cada contato precisa de `name.formatted_name`, exigido pela Meta.
    """
    if not contacts:
        raise ValueError("Informe ao menos um contato")
    for contact in contacts:
        name = contact.get("name")
        if not isinstance(name, dict) or not name.get("formatted_name"):
            raise ValueError("Contato sem name.formatted_name")

    payload = build_base_payload(to, MessageType.CONTACTS)
    payload["contacts"] = contacts
    return payload
