"""Enums de domínio para tipos de mensagem WhatsApp."""

from __future__ import annotations

from enum import StrEnum


class MessageType(StrEnum):
    """Tipos de conteúdo outbound suportados pela API Meta/WhatsApp."""

    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    STICKER = "sticker"
    LOCATION = "location"
    CONTACTS = "contacts"
    ADDRESS = "address"
    INTERACTIVE = "interactive"
    TEMPLATE = "template"
    REACTION = "reaction"


# Subconjunto de MessageType que carrega objeto de mídia
MEDIA_MESSAGE_TYPES = frozenset(
    {
        MessageType.IMAGE,
        MessageType.VIDEO,
        MessageType.AUDIO,
        MessageType.DOCUMENT,
        MessageType.STICKER,
    }
)


class InteractiveType(StrEnum):
    """Tipos de mensagens interativas suportadas."""

    BUTTON = "button"
    LIST = "list"
    PRODUCT = "product"
    PRODUCT_LIST = "product_list"
    FLOW = "flow"
    CTA_URL = "cta_url"
    LOCATION_REQUEST_MESSAGE = "location_request_message"


class TemplateCategory(StrEnum):
    """Categorias de template conforme política Meta/WhatsApp."""

    MARKETING = "MARKETING"
    UTILITY = "UTILITY"
    AUTHENTICATION = "AUTHENTICATION"


class BusinessAssetType(StrEnum):
    """Tipos de ativo listáveis em owned_businesses."""

    WHATSAPP_BUSINESS_ACCOUNT = "WHATSAPP_BUSINESS_ACCOUNT"
    AD_ACCOUNT = "AD_ACCOUNT"
    PAGE = "PAGE"
    PIXEL = "PIXEL"


class BusinessRole(StrEnum):
    """Papéis de usuário/system user no Business Manager."""

    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"
    DEVELOPER = "DEVELOPER"
    ANALYST = "ANALYST"


class BusinessType(StrEnum):
    AGENCY = "AGENCY"
    ADVERTISER = "ADVERTISER"
    APP_DEVELOPER = "APP_DEVELOPER"
    PUBLISHER = "PUBLISHER"
