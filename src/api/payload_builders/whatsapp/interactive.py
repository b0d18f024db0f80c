"""Builders para mensagens interativas (botões, lista, CTA URL, flow, localização)."""

from __future__ import annotations

from typing import Any

from app.constants.whatsapp import InteractiveType, MessageType

from .base import build_base_payload

# Limite de botões de resposta da API Meta
MAX_REPLY_BUTTONS = 3


def build_interactive_payload(to: str, interactive: dict[str, Any]) -> dict[str, Any]:
    """Envelopa um objeto `interactive` já montado.

    Raises:
        ValueError: Se tipo interativo ausente ou não suportado
    """
    try:
        InteractiveType(interactive.get("type", ""))
    except ValueError as exc:
        raise ValueError(f"Tipo interativo não suportado: {interactive.get('type')}") from exc

    payload = build_base_payload(to, MessageType.INTERACTIVE)
    payload["interactive"] = interactive
    return payload


def build_reply_buttons(
    to: str,
    body: str,
    buttons: list[tuple[str, str]],
    footer_text: str | None = None,
) -> dict[str, Any]:
    """Mensagem com até 3 botões de resposta rápida (id, título)."""
    if not buttons or len(buttons) > MAX_REPLY_BUTTONS:
        raise ValueError(f"Informe de 1 a {MAX_REPLY_BUTTONS} botões")

    interactive: dict[str, Any] = {
        "type": InteractiveType.BUTTON.value,
        "body": {"text": body},
        "action": {
            "buttons": [
                {"type": "reply", "reply": {"id": button_id, "title": title}}
                for button_id, title in buttons
            ]
        },
    }
    _add_footer(interactive, footer_text)
    return build_interactive_payload(to, interactive)


def build_cta_url_payload(
    to: str,
    body: str,
    display_text: str,
    url: str,
    header_text: str | None = None,
    footer_text: str | None = None,
) -> dict[str, Any]:
    interactive: dict[str, Any] = {
        "type": InteractiveType.CTA_URL.value,
        "body": {"text": body},
        "action": {
            "name": "cta_url",
            "parameters": {"display_text": display_text, "url": url},
        },
    }
    if header_text:
        interactive["header"] = {"type": "text", "text": header_text}
    _add_footer(interactive, footer_text)
    return build_interactive_payload(to, interactive)


def build_flow_payload(
    to: str,
    flow_id: str,
    flow_cta: str = "Start",
    body: str = "Please complete this flow",
    flow_token: str | None = None,
    screen: str | None = None,
    data: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Mensagem que abre um WhatsApp Flow.

    Com `screen` o flow abre em modo navigate; `data` vai como payload inicial.
    """
    if not flow_id:
        raise ValueError("flow_id é obrigatório")

    parameters: dict[str, Any] = {
        "flow_message_version": "3",
        "flow_id": flow_id,
        "flow_cta": flow_cta,
    }
    if flow_token:
        parameters["flow_token"] = flow_token
    if screen:
        parameters["flow_action"] = "navigate"
        action_payload: dict[str, Any] = {"screen": screen}
        if data:
            action_payload["data"] = data
        parameters["flow_action_payload"] = action_payload

    interactive = {
        "type": InteractiveType.FLOW.value,
        "body": {"text": body},
        "action": {"name": "flow", "parameters": parameters},
    }
    return build_interactive_payload(to, interactive)


def build_location_request_payload(
    to: str,
    body: str,
    footer_text: str | None = None,
) -> dict[str, Any]:
    interactive: dict[str, Any] = {
        "type": InteractiveType.LOCATION_REQUEST_MESSAGE.value,
        "body": {"text": body},
        "action": {"name": "send_location"},
    }
    _add_footer(interactive, footer_text)
    return build_interactive_payload(to, interactive)


def _add_footer(interactive: dict[str, Any], footer_text: str | None) -> None:
    if footer_text:
        interactive["footer"] = {"text": footer_text}
