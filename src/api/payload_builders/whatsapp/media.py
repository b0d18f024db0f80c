"""Builder para mensagens de mídia (image, video, audio, document, sticker)."""

from __future__ import annotations

from typing import Any

from app.constants.whatsapp import MEDIA_MESSAGE_TYPES, MessageType

from .base import build_base_payload

# Tipos que aceitam legenda
_CAPTION_TYPES = frozenset({MessageType.IMAGE, MessageType.VIDEO, MessageType.DOCUMENT})


def build_media_payload(
    to: str,
    media_type: str,
    media_id: str | None = None,
    media_url: str | None = None,
    caption: str | None = None,
    filename: str | None = None,
) -> dict[str, Any]:
    """Constrói payload de mídia por ID (upload prévio) ou link público.

    Raises:
        ValueError: Se tipo não for de mídia ou se nem ID nem link forem informados
    """
    try:
        msg_type = MessageType(media_type)
    except ValueError as exc:
        raise ValueError(f"Tipo de mídia não suportado: {media_type}") from exc
    if msg_type not in MEDIA_MESSAGE_TYPES:
        raise ValueError(f"Tipo de mídia não suportado: {media_type}")

    payload = build_base_payload(to, msg_type)
    payload[msg_type.value] = _build_media_object(
        msg_type, media_id, media_url, caption, filename
    )
    return payload


def _build_media_object(
    msg_type: MessageType,
    media_id: str | None,
    media_url: str | None,
    caption: str | None,
    filename: str | None,
) -> dict[str, Any]:
    media: dict[str, Any] = {}
    if media_id:
        media["id"] = media_id
    elif media_url:
        media["link"] = media_url
    else:
        raise ValueError("Informe media_id ou media_url")

    if caption and msg_type in _CAPTION_TYPES:
        media["caption"] = caption
    if filename and msg_type == MessageType.DOCUMENT:
        media["filename"] = filename
    return media
