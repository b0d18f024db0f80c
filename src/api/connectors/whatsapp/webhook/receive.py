"""Recepção do POST de webhook: tamanho, assinatura e JSON, nessa ordem.

Nenhum conteúdo do payload é logado ou incluído nas exceções.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..signature import SignatureResult, verify_meta_signature

if TYPE_CHECKING:
    from collections.abc import Mapping

# Envelopes da Meta ficam bem abaixo disso; acima, rejeitamos antes do HMAC
DEFAULT_MAX_BODY_BYTES = 3 * 1024 * 1024


class WebhookRequestError(ValueError):
    """Rejeição do webhook na borda HTTP; str(exc) é o motivo enumerável."""


class PayloadTooLargeError(WebhookRequestError):
    """Corpo acima do limite configurado."""


class InvalidSignatureError(WebhookRequestError):
    """Assinatura ausente ou divergente."""


class InvalidJsonError(WebhookRequestError):
    """Corpo não é JSON ou não é um objeto na raiz."""


@dataclass(frozen=True)
class WebhookRequest:
    """Webhook aceito na borda, pronto para o dispatcher."""

    payload: dict[str, Any]
    signature: SignatureResult
    size_bytes: int


def parse_webhook_request(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
) -> WebhookRequest:
    """Valida e decodifica o corpo bruto do webhook.

    A assinatura é calculada sobre os bytes exatos recebidos,
    antes de qualquer parse.

    Raises:
        PayloadTooLargeError: Corpo maior que max_body_bytes
        InvalidSignatureError: Assinatura ausente/inválida com secret configurado
        InvalidJsonError: JSON inválido ou raiz que não é objeto
    """
    if len(raw_body) > max_body_bytes:
        raise PayloadTooLargeError("payload_too_large")

    signature = verify_meta_signature(raw_body, headers, secret)
    if not signature.valid:
        raise InvalidSignatureError(signature.error or "invalid_signature")

    return WebhookRequest(
        payload=_decode_object(raw_body),
        signature=signature,
        size_bytes=len(raw_body),
    )


def _decode_object(raw_body: bytes) -> dict[str, Any]:
    try:
        payload = json.loads(raw_body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJsonError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidJsonError("payload_not_object")
    return payload
