"""Endpoints de webhook do WhatsApp.

Endpoints:
- GET /webhook/whatsapp: verificação de webhook (Meta challenge)
- POST /webhook/whatsapp: recebimento e despacho de eventos

Fluxo:
1. GET: Meta envia challenge, respondemos com hub.challenge
2. POST: validamos tamanho, assinatura e JSON, despachamos para os handlers

Segurança:
- Validação HMAC em POST quando WHATSAPP_APP_SECRET está configurado
- Resposta rápida (200 OK); handlers assíncronos rodam em background
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request, Response, status

from api.connectors.whatsapp.webhook.dispatcher import WebhookDispatcher
from api.connectors.whatsapp.webhook.receive import (
    InvalidJsonError,
    InvalidSignatureError,
    PayloadTooLargeError,
    parse_webhook_request,
)
from api.connectors.whatsapp.webhook.verify import verify_webhook_challenge
from app.observability import get_correlation_id, reset_correlation_id, set_correlation_id
from config.settings import get_whatsapp_settings

if TYPE_CHECKING:
    from config.settings import WhatsAppSettings

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_settings(request: Request) -> WhatsAppSettings:
    settings = getattr(request.app.state, "whatsapp_settings", None)
    return settings or get_whatsapp_settings()


def _get_dispatcher(request: Request) -> WebhookDispatcher:
    dispatcher = getattr(request.app.state, "webhook_dispatcher", None)
    if dispatcher is None:
        dispatcher = WebhookDispatcher()
        request.app.state.webhook_dispatcher = dispatcher
    return dispatcher


def _plain(content: str, status_code: int) -> Response:
    return Response(content=content, media_type="text/plain", status_code=status_code)


@router.get("/")
async def verify_webhook(request: Request) -> Response:
    """Verificação de webhook: responde ao challenge da Meta.

    Query params esperados:
    - hub.mode: deve ser "subscribe"
    - hub.verify_token: deve corresponder ao configurado
    - hub.challenge: valor a retornar

    Returns:
        Texto do challenge ou 403.
    """
    settings = _get_settings(request)
    hub_mode = request.query_params.get("hub.mode")

    challenge = verify_webhook_challenge(
        hub_mode=hub_mode,
        hub_verify_token=request.query_params.get("hub.verify_token"),
        hub_challenge=request.query_params.get("hub.challenge"),
        expected_token=settings.verify_token or None,
    )
    if challenge is None:
        logger.warning(
            "webhook_verification_failed",
            extra={"channel": "whatsapp", "hub_mode": hub_mode},
        )
        return _plain("Forbidden", status.HTTP_403_FORBIDDEN)

    logger.info("webhook_verified", extra={"channel": "whatsapp"})
    # Meta espera o challenge como texto puro
    return _plain(challenge, status.HTTP_200_OK)


@router.post("/", response_model=None)
async def receive_webhook(request: Request) -> Response | dict[str, Any]:
    """Recebimento de eventos do WhatsApp.

    Validações:
    1. Tamanho do corpo (413)
    2. Assinatura HMAC (X-Hub-Signature-256)
    3. JSON válido e objeto na raiz

    Returns:
        Confirmação de recebimento ou Response de erro.
    """
    token = set_correlation_id(request.headers.get("x-correlation-id"))

    try:
        settings = _get_settings(request)
        raw_body = await request.body()

        try:
            webhook = parse_webhook_request(
                raw_body=raw_body,
                headers=dict(request.headers),
                secret=settings.app_secret or None,
                max_body_bytes=settings.webhook_max_body_bytes,
            )
        except PayloadTooLargeError:
            logger.warning(
                "webhook_payload_too_large",
                extra={
                    "channel": "whatsapp",
                    "correlation_id": get_correlation_id(),
                    "payload_size": len(raw_body),
                },
            )
            return _plain("Payload Too Large", status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)
        except InvalidSignatureError as exc:
            logger.warning(
                "webhook_signature_invalid",
                extra={
                    "channel": "whatsapp",
                    "correlation_id": get_correlation_id(),
                    "error": str(exc),
                },
            )
            return _plain("Forbidden", status.HTTP_403_FORBIDDEN)
        except InvalidJsonError as exc:
            logger.warning(
                "webhook_json_invalid",
                extra={
                    "channel": "whatsapp",
                    "correlation_id": get_correlation_id(),
                    "error": str(exc),
                },
            )
            return _plain("Bad Request", status.HTTP_400_BAD_REQUEST)

        logger.info(
            "webhook_received",
            extra={
                "channel": "whatsapp",
                "correlation_id": get_correlation_id(),
                "signature_valid": webhook.signature.valid,
                "signature_skipped": webhook.signature.skipped,
                "payload_size": webhook.size_bytes,
            },
        )

        summary = _get_dispatcher(request).dispatch(webhook.payload)

        return {
            "status": "received",
            "correlation_id": get_correlation_id(),
            "messages": summary.messages,
            "statuses": summary.statuses,
        }
    finally:
        reset_correlation_id(token)
