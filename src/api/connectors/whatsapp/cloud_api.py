"""Operações da WhatsApp Cloud API.

Cada método é uma chamada lógica única via WhatsAppHttpClient.send_request,
portanto sujeita à admissão e ao retry do RateLimiter do cliente.
Payloads vêm dos builders puros em api.payload_builders.whatsapp.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from api.payload_builders.whatsapp import (
    build_address_request_payload,
    build_contacts_payload,
    build_cta_url_payload,
    build_flow_payload,
    build_interactive_payload,
    build_location_payload,
    build_location_request_payload,
    build_media_payload,
    build_reaction_payload,
    build_read_receipt_payload,
    build_template_definition,
    build_template_payload,
    build_text_payload,
    with_context,
)

from .http_client import WhatsAppHttpClient, create_whatsapp_http_client

if TYPE_CHECKING:
    from config.settings import WhatsAppSettings

logger = logging.getLogger(__name__)

BUSINESS_PROFILE_FIELDS = (
    "about",
    "address",
    "description",
    "email",
    "websites",
    "profile_picture_url",
    "vertical",
)
DEFAULT_TEMPLATES_LIMIT = 20


class WhatsAppCloudApi:
    """Fachada das operações de envio, mídia, perfil e templates.

    Args:
        http_client: Cliente com RateLimiter próprio
        phone_number_id: ID do número remetente
        business_account_id: WABA ID; obrigatório só para templates e números
    """

    def __init__(
        self,
        http_client: WhatsAppHttpClient,
        phone_number_id: str,
        business_account_id: str | None = None,
    ) -> None:
        if not phone_number_id:
            raise ValueError("phone_number_id é obrigatório")
        self._http = http_client
        self._phone_number_id = phone_number_id
        self._business_account_id = business_account_id

    @classmethod
    def from_settings(cls, settings: WhatsAppSettings | None = None) -> WhatsAppCloudApi:
        # Import local para evitar dependência circular
        from config.settings import get_whatsapp_settings

        whatsapp = settings or get_whatsapp_settings()
        return cls(
            http_client=create_whatsapp_http_client(whatsapp),
            phone_number_id=whatsapp.phone_number_id,
            business_account_id=whatsapp.business_account_id or None,
        )

    @property
    def http_client(self) -> WhatsAppHttpClient:
        return self._http

    # ──────────────────────────────────────────────
    # Mensagens
    # ──────────────────────────────────────────────

    async def send_text_message(
        self,
        to: str,
        text: str,
        preview_url: bool = False,
        reply_to: str | None = None,
    ) -> dict[str, Any]:
        return await self._send(build_text_payload(to, text, preview_url), reply_to)

    async def send_media_message(
        self,
        to: str,
        media_type: str,
        media_id: str | None = None,
        media_url: str | None = None,
        caption: str | None = None,
        filename: str | None = None,
        reply_to: str | None = None,
    ) -> dict[str, Any]:
        payload = build_media_payload(to, media_type, media_id, media_url, caption, filename)
        return await self._send(payload, reply_to)

    async def send_location_message(
        self,
        to: str,
        latitude: float,
        longitude: float,
        name: str | None = None,
        address: str | None = None,
        reply_to: str | None = None,
    ) -> dict[str, Any]:
        payload = build_location_payload(to, latitude, longitude, name, address)
        return await self._send(payload, reply_to)

    async def send_template_message(
        self,
        to: str,
        template_name: str,
        language_code: str = "pt_BR",
        components: list[dict[str, Any]] | None = None,
        ttl: str | None = None,
        reply_to: str | None = None,
    ) -> dict[str, Any]:
        payload = build_template_payload(to, template_name, language_code, components, ttl)
        return await self._send(payload, reply_to)

    async def send_interactive_message(
        self,
        to: str,
        interactive: dict[str, Any],
        reply_to: str | None = None,
    ) -> dict[str, Any]:
        return await self._send(build_interactive_payload(to, interactive), reply_to)

    async def send_contact_message(
        self,
        to: str,
        contacts: list[dict[str, Any]],
        reply_to: str | None = None,
    ) -> dict[str, Any]:
        return await self._send(build_contacts_payload(to, contacts), reply_to)

    async def send_reaction(self, to: str, message_id: str, emoji: str) -> dict[str, Any]:
        return await self._send(build_reaction_payload(to, message_id, emoji))

    async def mark_message_as_read(self, message_id: str) -> dict[str, Any]:
        return await self._send(build_read_receipt_payload(message_id))

    async def send_address_request(
        self,
        to: str,
        request_type: Literal["HOME", "WORK"] = "HOME",
        button_text: str = "Send Address",
        reply_to: str | None = None,
    ) -> dict[str, Any]:
        payload = build_address_request_payload(to, request_type, button_text)
        return await self._send(payload, reply_to)

    async def send_cta_url_message(
        self,
        to: str,
        body: str,
        display_text: str,
        url: str,
        header_text: str | None = None,
        footer_text: str | None = None,
        reply_to: str | None = None,
    ) -> dict[str, Any]:
        payload = build_cta_url_payload(to, body, display_text, url, header_text, footer_text)
        return await self._send(payload, reply_to)

    async def send_flow_message(
        self,
        to: str,
        flow_id: str,
        flow_cta: str = "Start",
        body: str = "Please complete this flow",
        flow_token: str | None = None,
        screen: str | None = None,
        data: dict[str, Any] | None = None,
        reply_to: str | None = None,
    ) -> dict[str, Any]:
        payload = build_flow_payload(
            to,
            flow_id,
            flow_cta=flow_cta,
            body=body,
            flow_token=flow_token,
            screen=screen,
            data=data,
        )
        return await self._send(payload, reply_to)

    async def send_location_request(
        self,
        to: str,
        body: str,
        footer_text: str | None = None,
        reply_to: str | None = None,
    ) -> dict[str, Any]:
        payload = build_location_request_payload(to, body, footer_text)
        return await self._send(payload, reply_to)

    # ──────────────────────────────────────────────
    # Mídia
    # ──────────────────────────────────────────────

    async def upload_media(self, file_path: str | Path, mime_type: str) -> dict[str, Any]:
        """Faz upload de arquivo local para o endpoint de mídia.

        Returns:
            Response da Meta com o `id` da mídia

        Raises:
            FileNotFoundError: Se o arquivo não existe
        """
        path = Path(file_path)
        content = await asyncio.to_thread(path.read_bytes)
        logger.info(
            "media_upload_started",
            extra={"mime_type": mime_type, "size_bytes": len(content)},
        )
        return await self._http.send_request(
            "POST",
            f"{self._phone_number_id}/media",
            data={"messaging_product": "whatsapp", "type": mime_type},
            files={"file": (path.name, content, mime_type)},
        )

    async def retrieve_media_url(self, media_id: str) -> dict[str, Any]:
        return await self._http.send_request("GET", media_id)

    async def delete_media(self, media_id: str) -> dict[str, Any]:
        return await self._http.send_request("DELETE", media_id)

    # ──────────────────────────────────────────────
    # Perfil e números
    # ──────────────────────────────────────────────

    async def get_business_profile(self) -> dict[str, Any]:
        return await self._http.send_request(
            "GET",
            f"{self._phone_number_id}/whatsapp_business_profile",
            params={"fields": ",".join(BUSINESS_PROFILE_FIELDS)},
        )

    async def set_business_profile(self, **profile: Any) -> dict[str, Any]:
        """Atualiza campos do perfil (about, address, description, email, ...)."""
        return await self._http.send_request(
            "POST",
            f"{self._phone_number_id}/whatsapp_business_profile",
            json={"messaging_product": "whatsapp", **profile},
        )

    async def retrieve_phone_numbers(self) -> dict[str, Any]:
        return await self._http.send_request("GET", f"{self._require_waba()}/phone_numbers")

    async def register_phone_number(self, cc: str, phone_number: str, pin: str) -> dict[str, Any]:
        """Registra um número na WABA (código do país, número e PIN de 6 dígitos)."""
        if not cc or not phone_number:
            raise ValueError("cc e phone_number são obrigatórios")
        if not (len(pin) == 6 and pin.isdigit()):
            raise ValueError("pin deve ter 6 dígitos")
        return await self._http.send_request(
            "POST",
            f"{self._require_waba()}/phone_numbers",
            json={"cc": cc, "phone_number": phone_number, "pin": pin},
        )

    async def deregister_phone_number(self, phone_number_id: str) -> dict[str, Any]:
        if not phone_number_id:
            raise ValueError("phone_number_id é obrigatório")
        return await self._http.send_request("DELETE", phone_number_id)

    async def update_phone_number_settings(
        self,
        phone_number_id: str,
        settings: dict[str, Any],
    ) -> dict[str, Any]:
        if not phone_number_id:
            raise ValueError("phone_number_id é obrigatório")
        return await self._http.send_request(
            "POST",
            f"{phone_number_id}/settings",
            json=settings,
        )

    # ──────────────────────────────────────────────
    # Templates
    # ──────────────────────────────────────────────

    async def get_templates(
        self,
        limit: int = DEFAULT_TEMPLATES_LIMIT,
        after: str | None = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"limit": limit}
        if after:
            params["after"] = after
        return await self._http.send_request(
            "GET",
            f"{self._require_waba()}/message_templates",
            params=params,
        )

    async def create_template(
        self,
        name: str,
        category: str,
        language: str = "pt_BR",
        components: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """Submete template para aprovação; category deve ser uma TemplateCategory."""
        template = build_template_definition(name, category, language, components)
        return await self._http.send_request(
            "POST",
            f"{self._require_waba()}/message_templates",
            json=template,
        )

    async def delete_template(self, name: str) -> dict[str, Any]:
        return await self._http.send_request(
            "DELETE",
            f"{self._require_waba()}/message_templates",
            params={"name": name},
        )

    def update_access_token(self, access_token: str) -> None:
        self._http.update_access_token(access_token)

    # ──────────────────────────────────────────────
    # Internos
    # ──────────────────────────────────────────────

    async def _send(self, payload: dict[str, Any], reply_to: str | None = None) -> dict[str, Any]:
        return await self._http.send_request(
            "POST",
            f"{self._phone_number_id}/messages",
            json=with_context(payload, reply_to),
        )

    def _require_waba(self) -> str:
        if not self._business_account_id:
            raise ValueError(
                "business_account_id é obrigatório para esta operação. "
                "Verifique se WHATSAPP_BUSINESS_ACCOUNT_ID está configurado."
            )
        return self._business_account_id
