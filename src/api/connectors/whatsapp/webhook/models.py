"""Modelos tipados dos eventos inbound do webhook WhatsApp.

Mensagens são discriminadas pelo campo `type` e status pelo campo
`status`; handlers fazem match no tag para tratar cada variante.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class _InboundModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class MessageContext(_InboundModel):
    """Referência à mensagem respondida (reply/encaminhamento)."""

    from_: str | None = Field(default=None, alias="from")
    id: str | None = None
    forwarded: bool = False


class MessageBase(_InboundModel):
    """Campos comuns a toda mensagem inbound."""

    from_: str | None = Field(default=None, alias="from")
    id: str | None = None
    timestamp: str | None = None
    context: MessageContext | None = None


class TextBody(_InboundModel):
    body: str


class MediaObject(_InboundModel):
    id: str
    mime_type: str | None = None
    sha256: str | None = None
    caption: str | None = None
    filename: str | None = None
    voice: bool | None = None
    animated: bool | None = None


class ButtonReplyBody(_InboundModel):
    text: str
    payload: str | None = None


class LocationBody(_InboundModel):
    latitude: float
    longitude: float
    name: str | None = None
    address: str | None = None


class SystemBody(_InboundModel):
    body: str
    type: str | None = None
    identity: str | None = None
    wa_id: str | None = None
    new_wa_id: str | None = None
    customer: str | None = None


class InteractiveReply(_InboundModel):
    id: str
    title: str
    description: str | None = None


class FlowReply(_InboundModel):
    name: str | None = None
    body: str | None = None
    response_json: str


class InteractiveBody(_InboundModel):
    type: str
    button_reply: InteractiveReply | None = None
    list_reply: InteractiveReply | None = None
    nfm_reply: FlowReply | None = None


class ReactionBody(_InboundModel):
    message_id: str
    emoji: str | None = None


class TextMessage(MessageBase):
    type: Literal["text"] = "text"
    text: TextBody


class ImageMessage(MessageBase):
    type: Literal["image"] = "image"
    image: MediaObject


class StickerMessage(MessageBase):
    type: Literal["sticker"] = "sticker"
    sticker: MediaObject


class AudioMessage(MessageBase):
    type: Literal["audio"] = "audio"
    audio: MediaObject


class DocumentMessage(MessageBase):
    type: Literal["document"] = "document"
    document: MediaObject


class VideoMessage(MessageBase):
    type: Literal["video"] = "video"
    video: MediaObject


class ButtonMessage(MessageBase):
    type: Literal["button"] = "button"
    button: ButtonReplyBody


class ContactsMessage(MessageBase):
    type: Literal["contacts"] = "contacts"
    contacts: list[dict[str, Any]] = Field(default_factory=list)


class LocationMessage(MessageBase):
    type: Literal["location"] = "location"
    location: LocationBody


class SystemMessage(MessageBase):
    type: Literal["system"] = "system"
    system: SystemBody


class InteractiveMessage(MessageBase):
    type: Literal["interactive"] = "interactive"
    interactive: InteractiveBody


class ReactionMessage(MessageBase):
    type: Literal["reaction"] = "reaction"
    reaction: ReactionBody


class UnknownMessage(MessageBase):
    """Tipo `unknown` da Meta, tag não suportado ou corpo fora do formato.

    O tag original fica em raw_type.
    """

    type: Literal["unknown"] = "unknown"
    raw_type: str = "unknown"
    errors: list[dict[str, Any]] = Field(default_factory=list)


InboundMessage = (
    TextMessage
    | ImageMessage
    | StickerMessage
    | AudioMessage
    | DocumentMessage
    | VideoMessage
    | ButtonMessage
    | ContactsMessage
    | LocationMessage
    | SystemMessage
    | InteractiveMessage
    | ReactionMessage
    | UnknownMessage
)

_MESSAGE_MODELS: dict[str, type[MessageBase]] = {
    "text": TextMessage,
    "image": ImageMessage,
    "sticker": StickerMessage,
    "audio": AudioMessage,
    "document": DocumentMessage,
    "video": VideoMessage,
    "button": ButtonMessage,
    "contacts": ContactsMessage,
    "location": LocationMessage,
    "system": SystemMessage,
    "interactive": InteractiveMessage,
    "reaction": ReactionMessage,
    "unknown": UnknownMessage,
}


class StatusError(_InboundModel):
    code: int
    title: str | None = None
    message: str | None = None


class ConversationOrigin(_InboundModel):
    type: str


class StatusConversation(_InboundModel):
    id: str
    origin: ConversationOrigin | None = None
    expiration_timestamp: str | None = None


class StatusPricing(_InboundModel):
    billable: bool | None = None
    pricing_model: str | None = None
    category: str | None = None


class StatusBase(_InboundModel):
    """Campos comuns a toda atualização de status."""

    id: str | None = None
    timestamp: str | None = None
    recipient_id: str | None = None
    conversation: StatusConversation | None = None
    pricing: StatusPricing | None = None


class SentStatus(StatusBase):
    status: Literal["sent"] = "sent"


class DeliveredStatus(StatusBase):
    status: Literal["delivered"] = "delivered"


class ReadStatus(StatusBase):
    status: Literal["read"] = "read"


class FailedStatus(StatusBase):
    status: Literal["failed"] = "failed"
    errors: list[StatusError] = Field(default_factory=list)


class UnknownStatus(StatusBase):
    """Status não suportado ou fora do formato (tag original em raw_status)."""

    status: Literal["unknown"] = "unknown"
    raw_status: str = "unknown"


InboundStatus = SentStatus | DeliveredStatus | ReadStatus | FailedStatus | UnknownStatus

_STATUS_MODELS: dict[str, type[StatusBase]] = {
    "sent": SentStatus,
    "delivered": DeliveredStatus,
    "read": ReadStatus,
    "failed": FailedStatus,
}


_MESSAGE_BASE_FIELDS = ("from", "id", "timestamp")
_STATUS_BASE_FIELDS = ("id", "timestamp", "recipient_id")


def parse_inbound_message(raw: Any) -> InboundMessage | None:
    """Converte item de `messages` na variante correspondente ao tag.

    Tag desconhecido ou corpo fora do formato viram UnknownMessage, para
    que o handler ainda receba o evento.

    Returns:
        Variante tipada, ou None se o item não for objeto ou não tiver tag.
    """
    if not isinstance(raw, dict):
        return None
    tag = raw.get("type")
    if not isinstance(tag, str):
        return None

    model = _MESSAGE_MODELS.get(tag)
    if model is None:
        logger.info("unsupported_message_type_received", extra={"message_type": tag})
        return UnknownMessage.model_validate(_unknown_message_data(raw, tag))

    try:
        return model.model_validate(raw)  # type: ignore[return-value]
    except ValidationError as exc:
        logger.warning(
            "webhook_message_invalid",
            extra={"message_type": tag, "error_count": exc.error_count()},
        )
        return UnknownMessage.model_validate(_unknown_message_data(raw, tag))


def parse_inbound_status(raw: Any) -> InboundStatus | None:
    """Converte item de `statuses` na variante correspondente ao tag.

    Returns:
        Variante tipada (UnknownStatus para tag desconhecido ou formato
        inválido), ou None se o item não for objeto ou não tiver tag.
    """
    if not isinstance(raw, dict):
        return None
    tag = raw.get("status")
    if not isinstance(tag, str):
        return None

    model = _STATUS_MODELS.get(tag)
    if model is None:
        logger.info("unsupported_status_received", extra={"status": tag})
        return UnknownStatus(**_scalar_fields(raw, _STATUS_BASE_FIELDS), raw_status=tag)

    try:
        return model.model_validate(raw)  # type: ignore[return-value]
    except ValidationError as exc:
        logger.warning(
            "webhook_status_invalid",
            extra={"status": tag, "error_count": exc.error_count()},
        )
        return UnknownStatus(**_scalar_fields(raw, _STATUS_BASE_FIELDS), raw_status=tag)


def _unknown_message_data(raw: dict[str, Any], tag: str) -> dict[str, Any]:
    data: dict[str, Any] = {**_scalar_fields(raw, _MESSAGE_BASE_FIELDS), "raw_type": tag}
    errors = raw.get("errors")
    if isinstance(errors, list):
        data["errors"] = [error for error in errors if isinstance(error, dict)]
    return data


def _scalar_fields(raw: dict[str, Any], names: tuple[str, ...]) -> dict[str, str]:
    # Só campos string entram no fallback, que assim nunca falha na validação
    return {name: raw[name] for name in names if isinstance(raw.get(name), str)}
