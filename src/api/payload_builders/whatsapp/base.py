"""Campos comuns a todo payload de mensagem da API Meta."""

from __future__ import annotations

from typing import Any

MESSAGING_PRODUCT = "whatsapp"


def build_base_payload(to: str, message_type: str) -> dict[str, Any]:
    """Constrói a parte comum do payload de envio.

    Args:
        to: Número/wa_id do destinatário
        message_type: Valor do campo `type`

    Raises:
        ValueError: Se destinatário vazio
    """
    if not to or not to.strip():
        raise ValueError("Destinatário (to) é obrigatório")

    return {
        "messaging_product": MESSAGING_PRODUCT,
        "recipient_type": "individual",
        "to": to,
        "type": message_type,
    }


def with_context(payload: dict[str, Any], reply_to: str | None) -> dict[str, Any]:
    """Retorna cópia do payload marcada como resposta a `reply_to`."""
    if not reply_to:
        return payload
    return {**payload, "context": {"message_id": reply_to}}
