"""Catálogo de diagnósticos para erros da API Meta/WhatsApp.

Lookup puro: chave "{type}-{code}", depois "{code}", depois "default".
O enriquecimento devolve um novo erro, sem mutar o original.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .meta_errors import WhatsAppApiError


@dataclass(frozen=True)
class ErrorHelp:
    """Diagnóstico legível e solução sugerida para um erro."""

    message: str
    solution: str


DEFAULT_ERROR_KEY = "default"

ERROR_CATALOG: Mapping[str, ErrorHelp] = MappingProxyType(
    {
        # Autorização
        "OAuthException-190": ErrorHelp(
            "Invalid OAuth access token",
            "Check that your access token is valid and has not expired. "
            "You may need to generate a new one.",
        ),
        "OAuthException-10": ErrorHelp(
            "Application does not have permission for this action",
            "Ensure your app has the required permissions. "
            "Check your app settings in the Meta Developer Portal.",
        ),
        # Rate limiting
        "OAuthException-80004": ErrorHelp(
            "Rate limit hit",
            "Your application is making too many requests. "
            "Implement rate limiting or exponential backoff.",
        ),
        "4-30": ErrorHelp(
            "Too many messages sent to this number",
            "You have exceeded the rate at which you can send messages to this user. "
            "Wait and try again later.",
        ),
        # Conteúdo da mensagem
        "GraphMethodException-100": ErrorHelp(
            "Invalid parameter",
            "One or more parameters in your request are invalid. "
            "Check the error details for specific fields to fix.",
        ),
        "131000": ErrorHelp(
            "Message failed to send",
            "The message failed to send. Check that the recipient is a valid "
            "WhatsApp user and try again.",
        ),
        "131005": ErrorHelp(
            "Message content contains blocked keywords",
            "Your message contains content that is blocked by WhatsApp. "
            "Modify your message and try again.",
        ),
        "131014": ErrorHelp(
            "Template not approved",
            "The template you are trying to use has not been approved. "
            "Check the status of your template in the Meta Business Manager.",
        ),
        # Mídia
        "131009": ErrorHelp(
            "Media upload failed",
            "The media upload failed. Ensure the file is a supported format and size "
            "(images < 5MB, videos < 16MB, documents < 100MB).",
        ),
        "131051": ErrorHelp(
            "Media file not found",
            "The media file you are trying to send could not be found. "
            "Check the media ID or URL.",
        ),
        # Número de telefone
        "132000": ErrorHelp(
            "Phone number not WhatsApp enabled",
            "The phone number you are trying to use is not enabled for WhatsApp "
            "Business API. Verify the number in Meta Business Manager.",
        ),
        "132001": ErrorHelp(
            "Phone number not verified",
            "The recipient phone number is not a verified WhatsApp user. "
            "Ensure the number is correct and the user has WhatsApp installed.",
        ),
        DEFAULT_ERROR_KEY: ErrorHelp(
            "An unexpected error occurred",
            "Please check the error details and try again. "
            "If the issue persists, contact Meta support.",
        ),
    }
)


def classify(
    error: WhatsAppApiError,
    catalog: Mapping[str, ErrorHelp] = ERROR_CATALOG,
) -> ErrorHelp:
    """Retorna o diagnóstico do erro (não altera estado)."""
    return (
        catalog.get(f"{error.error_type}-{error.error_code}")
        or catalog.get(str(error.error_code))
        or catalog[DEFAULT_ERROR_KEY]
    )


def enrich(
    error: WhatsAppApiError,
    catalog: Mapping[str, ErrorHelp] = ERROR_CATALOG,
) -> WhatsAppApiError:
    """Cria novo erro com diagnóstico e solução anexados à mensagem.

    Mesma classe e mesmos campos do erro original, para que handlers
    baseados em tipo continuem funcionando. Não é idempotente: enriquecer
    um erro já enriquecido anexa o diagnóstico novamente.
    """
    help_ = classify(error, catalog)
    return type(error)(
        message=f"{error.message}\nDetails: {help_.message}\nSolution: {help_.solution}",
        error_type=error.error_type,
        error_code=error.error_code,
        error_subcode=error.error_subcode,
        fbtrace_id=error.fbtrace_id,
        status_code=error.status_code,
        retry_after_seconds=error.retry_after_seconds,
    )
