"""Builders de payload para API Meta/WhatsApp.

Funções puras por tipo de mensagem; validação falha com ValueError.
"""

from api.payload_builders.whatsapp.base import build_base_payload, with_context
from api.payload_builders.whatsapp.contacts import build_contacts_payload
from api.payload_builders.whatsapp.interactive import (
    build_cta_url_payload,
    build_flow_payload,
    build_interactive_payload,
    build_location_request_payload,
    build_reply_buttons,
)
from api.payload_builders.whatsapp.location import (
    build_address_request_payload,
    build_location_payload,
)
from api.payload_builders.whatsapp.media import build_media_payload
from api.payload_builders.whatsapp.template import (
    build_body_parameters,
    build_template_definition,
    build_template_payload,
)
from api.payload_builders.whatsapp.text import (
    build_reaction_payload,
    build_read_receipt_payload,
    build_text_payload,
)

__all__ = [
    "build_address_request_payload",
    "build_base_payload",
    "build_body_parameters",
    "build_contacts_payload",
    "build_cta_url_payload",
    "build_flow_payload",
    "build_interactive_payload",
    "build_location_payload",
    "build_location_request_payload",
    "build_media_payload",
    "build_reaction_payload",
    "build_read_receipt_payload",
    "build_reply_buttons",
    "build_template_definition",
    "build_template_payload",
    "build_text_payload",
    "with_context",
]
