"""Builders para texto, reação e confirmação de leitura."""

from __future__ import annotations

from typing import Any

from app.constants.whatsapp import MessageType

from .base import MESSAGING_PRODUCT, build_base_payload

# Limite de caracteres do corpo de texto da API Meta
MAX_TEXT_LENGTH = 4096


def build_text_payload(to: str, text: str, preview_url: bool = False) -> dict[str, Any]:
    """Constrói payload para mensagem de texto.

    Raises:
        ValueError: Se texto vazio ou acima do limite
    """
    if not text:
        raise ValueError("Texto da mensagem é obrigatório")
    if len(text) > MAX_TEXT_LENGTH:
        raise ValueError(f"Texto excede {MAX_TEXT_LENGTH} caracteres")

    payload = build_base_payload(to, MessageType.TEXT)
    payload["text"] = {"preview_url": preview_url, "body": text}
    return payload


def build_reaction_payload(to: str, message_id: str, emoji: str) -> dict[str, Any]:
    """Reação a uma mensagem; emoji vazio remove a reação."""
    if not message_id:
        raise ValueError("message_id é obrigatório para reação")

    payload = build_base_payload(to, MessageType.REACTION)
    payload["reaction"] = {"message_id": message_id, "emoji": emoji}
    return payload


def build_read_receipt_payload(message_id: str) -> dict[str, Any]:
    if not message_id:
        raise ValueError("message_id é obrigatório")
    return {
        "messaging_product": MESSAGING_PRODUCT,
        "status": "read",
        "message_id": message_id,
    }
