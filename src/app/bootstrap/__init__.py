"""Inicialização do serviço: logging a partir do ambiente e checagem de settings."""

from __future__ import annotations

import logging
import os

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import WhatsAppSettings, get_whatsapp_settings

SERVICE_NAME = "whatsapp_cloud"
DEFAULT_LOG_LEVEL = "INFO"
TEXT_LOG_FORMAT = "text"
STRICT_VALIDATION_ENVS = frozenset({"staging", "production"})

logger = logging.getLogger(__name__)


def current_environment() -> str:
    return os.getenv("ENVIRONMENT", "development").strip().lower() or "development"


def initialize_app() -> None:
    """Configura o logging do processo.

    LOG_LEVEL define o nível; LOG_FORMAT=text troca o JSON por texto
    legível, útil só em desenvolvimento local.
    """
    configure_logging(
        level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
        json_output=os.getenv("LOG_FORMAT", "json").strip().lower() != TEXT_LOG_FORMAT,
    )


def validate_runtime_settings(settings: WhatsAppSettings | None = None) -> list[str]:
    """Confere as settings do WhatsApp no startup.

    Returns:
        Problemas encontrados (vazia quando tudo OK)

    Raises:
        RuntimeError: Problemas encontrados em staging/production
    """
    environment = current_environment()
    problems = (settings or get_whatsapp_settings()).validate()
    extra = {"component": "bootstrap", "environment": environment}

    if not problems:
        logger.info("settings_validated", extra=extra)
        return problems

    logger.warning(
        "settings_validation_failed",
        extra={**extra, "error_count": len(problems), "errors": problems},
    )
    if environment in STRICT_VALIDATION_ENVS:
        raise RuntimeError(
            f"Settings do WhatsApp inválidas em {environment}: " + "; ".join(problems)
        )
    return problems
