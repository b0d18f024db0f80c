"""Webhook WhatsApp: verificação, assinatura, parsing e despacho de eventos."""

from ..signature import SignatureResult, verify_meta_signature
from .dispatcher import (
    DispatchSummary,
    SkipReason,
    WebhookDispatcher,
    WebhookHandlers,
    dispatch_webhook_event,
    drain_webhook_handlers,
)
from .models import (
    InboundMessage,
    InboundStatus,
    UnknownMessage,
    UnknownStatus,
    parse_inbound_message,
    parse_inbound_status,
)
from .receive import (
    InvalidJsonError,
    InvalidSignatureError,
    PayloadTooLargeError,
    WebhookRequest,
    WebhookRequestError,
    parse_webhook_request,
)
from .verify import verify_webhook_challenge

__all__ = [
    "DispatchSummary",
    "InboundMessage",
    "InboundStatus",
    "InvalidJsonError",
    "InvalidSignatureError",
    "PayloadTooLargeError",
    "SignatureResult",
    "SkipReason",
    "UnknownMessage",
    "UnknownStatus",
    "WebhookDispatcher",
    "WebhookHandlers",
    "WebhookRequest",
    "WebhookRequestError",
    "dispatch_webhook_event",
    "drain_webhook_handlers",
    "parse_inbound_message",
    "parse_inbound_status",
    "parse_webhook_request",
    "verify_meta_signature",
    "verify_webhook_challenge",
]
