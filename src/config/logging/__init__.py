"""Configuração de logging estruturado.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (app/bootstrap)
    configure_logging(level="INFO", service_name="whatsapp_cloud")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("rate_limit_wait", extra={"wait_seconds": 1.5})

Campos obrigatórios em todo log JSON:
asctime, level, logger, message, correlation_id, service.
Tokens Bearer e segredos em querystring são mascarados antes da emissão.
"""

from config.logging.config import VALID_LOG_LEVELS, configure_logging, get_logger
from config.logging.filters import CorrelationIdFilter, SecretRedactionFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
    create_text_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "VALID_LOG_LEVELS",
    "CorrelationIdFilter",
    "SecretRedactionFilter",
    "configure_logging",
    "create_json_formatter",
    "create_text_formatter",
    "get_logger",
]
