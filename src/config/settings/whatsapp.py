"""Settings específicas de WhatsApp.

Configurações do conector WhatsApp Cloud API via Graph API:
credenciais, webhook e política de admissão (rate limit).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# Constantes do Graph API
GRAPH_API_VERSION: str = "v24.0"
GRAPH_API_BASE_URL: str = "https://graph.facebook.com"


@dataclass(frozen=True)
class WhatsAppSettings:
    """Configurações do canal WhatsApp.

    Attributes:
        access_token: Token de acesso à Graph API
        phone_number_id: ID do número de telefone no Meta Business
        business_account_id: ID da conta de negócios (WABA)
        business_id: ID do Business Manager (operações de gestão)
        app_secret: Secret para validação HMAC do webhook (vazio = desabilitado)
        verify_token: Token do handshake de verificação do webhook
        webhook_max_body_bytes: Tamanho máximo aceito no POST do webhook
        api_version: Versão da Graph API (ex: v24.0)
        api_base_url: URL base da Graph API
        request_timeout_seconds: Timeout para requisições HTTP
        max_requests_per_minute: Teto de admissões na janela de 60s
        retry_on_too_many_requests: Retentar falhas de rate limit
        max_retries: Máximo de retries por chamada
        retry_delay_seconds: Delay base do backoff exponencial
    """

    # Credenciais
    access_token: str = ""
    phone_number_id: str = ""
    business_account_id: str = ""
    business_id: str = ""

    # Webhook
    app_secret: str = ""
    verify_token: str = ""
    webhook_max_body_bytes: int = 3 * 1024 * 1024

    # API
    api_version: str = GRAPH_API_VERSION
    api_base_url: str = GRAPH_API_BASE_URL
    request_timeout_seconds: float = 30.0

    # Admissão e retry
    max_requests_per_minute: int = 250
    retry_on_too_many_requests: bool = True
    max_retries: int = 3
    retry_delay_seconds: float = 1.0

    @property
    def api_endpoint(self) -> str:
        """URL base completa da API com versão."""
        return f"{self.api_base_url}/{self.api_version}"

    def validate(self) -> list[str]:
        """Valida configurações mínimas de WhatsApp.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.phone_number_id:
            errors.append("WHATSAPP_PHONE_NUMBER_ID não configurado")

        if not self.access_token:
            errors.append("WHATSAPP_ACCESS_TOKEN não configurado")

        if self.request_timeout_seconds <= 0:
            errors.append("WHATSAPP_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.max_requests_per_minute < 1:
            errors.append("WHATSAPP_MAX_REQUESTS_PER_MINUTE deve ser >= 1")

        if self.webhook_max_body_bytes < 1:
            errors.append("WHATSAPP_WEBHOOK_MAX_BODY_BYTES deve ser >= 1")

        if self.max_retries < 0:
            errors.append("WHATSAPP_MAX_RETRIES deve ser >= 0")

        if self.retry_delay_seconds < 0:
            errors.append("WHATSAPP_RETRY_DELAY_SECONDS deve ser >= 0")

        return errors


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _load_from_env() -> WhatsAppSettings:
    """Carrega WhatsAppSettings a partir de variáveis de ambiente."""
    return WhatsAppSettings(
        access_token=os.getenv("WHATSAPP_ACCESS_TOKEN", ""),
        phone_number_id=os.getenv("WHATSAPP_PHONE_NUMBER_ID", ""),
        business_account_id=os.getenv("WHATSAPP_BUSINESS_ACCOUNT_ID", ""),
        business_id=os.getenv("WHATSAPP_BUSINESS_ID", ""),
        app_secret=os.getenv("WHATSAPP_APP_SECRET", ""),
        verify_token=os.getenv("WHATSAPP_VERIFY_TOKEN", ""),
        webhook_max_body_bytes=int(
            os.getenv("WHATSAPP_WEBHOOK_MAX_BODY_BYTES", str(3 * 1024 * 1024))
        ),
        api_version=os.getenv("WHATSAPP_API_VERSION", GRAPH_API_VERSION),
        api_base_url=os.getenv("WHATSAPP_API_BASE_URL", GRAPH_API_BASE_URL),
        request_timeout_seconds=float(
            os.getenv("WHATSAPP_REQUEST_TIMEOUT_SECONDS", "30")
        ),
        max_requests_per_minute=int(
            os.getenv("WHATSAPP_MAX_REQUESTS_PER_MINUTE", "250")
        ),
        retry_on_too_many_requests=_env_bool(
            "WHATSAPP_RETRY_ON_TOO_MANY_REQUESTS", "true"
        ),
        max_retries=int(os.getenv("WHATSAPP_MAX_RETRIES", "3")),
        retry_delay_seconds=float(os.getenv("WHATSAPP_RETRY_DELAY_SECONDS", "1")),
    )


@lru_cache(maxsize=1)
def get_whatsapp_settings() -> WhatsAppSettings:
    """Retorna instância cacheada de WhatsAppSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
