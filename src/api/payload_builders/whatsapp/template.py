"""Builder para mensagens de template."""

from __future__ import annotations

from typing import Any

from app.constants.whatsapp import MessageType, TemplateCategory

from .base import build_base_payload


def build_template_payload(
    to: str,
    template_name: str,
    language_code: str = "pt_BR",
    components: list[dict[str, Any]] | None = None,
    ttl: str | None = None,
) -> dict[str, Any]:
    """Constrói payload para mensagem de template.

    Args:
        to: Destinatário
        template_name: Nome do template aprovado
        language_code: Código de idioma (ex: pt_BR, en_US)
        components: Componentes (header/body/button) com parâmetros
        ttl: Time-to-live em duração ISO 8601 (ex: "PT10M")

    Returns:
        Payload template conforme API Meta
    """
    if not template_name:
        raise ValueError("template_name é obrigatório")

    template_obj: dict[str, Any] = {
        "name": template_name,
        "language": {"code": language_code},
    }
    if components:
        template_obj["components"] = components

    payload = build_base_payload(to, MessageType.TEMPLATE)
    payload["template"] = template_obj
    if ttl:
        payload["ttl"] = ttl
    return payload


def build_body_parameters(values: list[str]) -> dict[str, Any]:
    """Componente `body` com parâmetros de texto posicionais."""
    return {
        "type": "body",
        "parameters": [{"type": "text", "text": str(v)} for v in values],
    }


def build_template_definition(
    name: str,
    category: str,
    language: str = "pt_BR",
    components: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Constrói o corpo de criação de template (message_templates).

    Args:
        name: Nome do template (minúsculas e underscore, conforme a Meta)
        category: MARKETING, UTILITY ou AUTHENTICATION (case-insensitive)
        language: Código de idioma do template
        components: Componentes header/body/footer/buttons

    Raises:
        ValueError: Nome vazio ou categoria fora de TemplateCategory
    """
    if not name:
        raise ValueError("name é obrigatório")
    try:
        normalized = TemplateCategory(str(category).upper())
    except ValueError as exc:
        valid = ", ".join(c.value for c in TemplateCategory)
        raise ValueError(f"category inválida: {category!r}. Válidas: {valid}") from exc

    return {
        "name": name,
        "category": normalized.value,
        "language": language,
        "components": list(components or []),
    }
