"""Formatters de logging (JSON para produção, texto para desenvolvimento)."""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

# Campos obrigatórios em todo log estruturado, na ordem de emissão
REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON; campos de `extra` saem como chaves de topo.

    Exemplo de output:
        {"asctime": "...", "level": "WARNING", "logger": "api.connectors...",
         "message": "rate_limit_wait", "correlation_id": "abc-123",
         "service": "whatsapp_cloud", "wait_seconds": 1.5}
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)


def create_text_formatter() -> logging.Formatter:
    return logging.Formatter(TEXT_FORMAT)
