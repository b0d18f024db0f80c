"""Cliente HTTP especializado para WhatsApp/Meta Graph API.

Estende HttpClient genérico com comportamentos específicos de WhatsApp:
- Toda chamada lógica passa pelo RateLimiter (admissão + retry em 429)
- Autenticação Bearer com validação do access_token
- Erros Meta (error.type, error.code) viram WhatsAppApiError enriquecido
- Respostas não-2xx sem corpo Meta viram HttpError com status/Retry-After
- Logging estruturado sem PII (tokens, números, conteúdo)
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from .error_catalog import enrich
from .http_base import HttpClient, HttpClientConfig, HttpError
from .meta_errors import parse_meta_error, parse_retry_after
from .meta_logging import endpoint_label, log_api_call
from .rate_limiter import RateLimiter, RateLimitPolicy

if TYPE_CHECKING:
    import httpx

    from config.settings import WhatsAppSettings

logger: logging.Logger = logging.getLogger(__name__)


class WhatsAppHttpClient(HttpClient):
    """Cliente HTTP para a Graph API com admissão e retry.

    Args:
        access_token: Bearer token da Graph API
        base_url: URL base com versão (ex: https://graph.facebook.com/v24.0)
        config: Configuração HTTP base
        rate_limiter: Controle de admissão; um novo por cliente se omitido
    """

    def __init__(
        self,
        access_token: str,
        base_url: str,
        config: HttpClientConfig | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        super().__init__(config)
        self._access_token = access_token
        self._base_url = base_url.rstrip("/")
        self._rate_limiter = rate_limiter or RateLimiter()

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    def update_access_token(self, access_token: str) -> None:
        """Troca o token usado nas próximas chamadas."""
        if not access_token or not access_token.strip():
            raise ValueError("access_token não pode ser vazio")
        self._access_token = access_token

    async def send_request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Executa uma chamada lógica à Graph API.

        Args:
            method: Verbo HTTP
            path: Caminho relativo à base (ex: "{phone_id}/messages")
            json: Corpo JSON
            params: Query string
            data: Campos de formulário (multipart)
            files: Arquivos (multipart)

        Returns:
            Response JSON da Meta ({} para corpo vazio)

        Raises:
            ValueError: Se access_token está vazio
            WhatsAppApiError: Erro estruturado da Meta (já enriquecido)
            HttpError: Falha de transporte ou status sem corpo Meta
        """
        url = f"{self._base_url}/{path.lstrip('/')}"

        async def _attempt() -> dict[str, Any]:
            started = time.perf_counter()
            response = await self.request(
                method,
                url,
                json=json,
                params=params,
                data=data,
                files=files,
                headers=self._build_headers(json_body=json is not None),
            )
            elapsed_ms = (time.perf_counter() - started) * 1000
            return self._process_response(response, method, path, elapsed_ms)

        return await self._rate_limiter.execute(_attempt)

    def _build_headers(self, json_body: bool) -> dict[str, str]:
        """Monta headers de autenticação.

        Raises:
            ValueError: Se access_token inválido
        """
        if not self._access_token or not self._access_token.strip():
            logger.error("access_token ausente ou vazio")
            raise ValueError(
                "access_token é obrigatório. "
                "Verifique se WHATSAPP_ACCESS_TOKEN está configurado."
            )

        headers = {"Authorization": f"Bearer {self._access_token}"}
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _process_response(
        self,
        response: httpx.Response,
        method: str,
        endpoint: str,
        elapsed_ms: float = 0.0,
    ) -> dict[str, Any]:
        """Processa response da API Meta/WhatsApp."""
        response_data = self._decode_body(response, endpoint)

        meta_error = parse_meta_error(response_data, response.status_code, response.headers)
        if meta_error:
            log_api_call(method, endpoint, response.status_code, elapsed_ms, meta_error)
            raise enrich(meta_error)

        if not response.is_success:
            log_api_call(method, endpoint, response.status_code, elapsed_ms)
            raise HttpError(
                f"http_status_{response.status_code}",
                status_code=response.status_code,
                retry_after_seconds=parse_retry_after(response.headers.get("retry-after")),
            )

        log_api_call(method, endpoint, response.status_code, elapsed_ms)
        return response_data

    def _decode_body(self, response: httpx.Response, endpoint: str) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as exc:
            if not response.is_success:
                return {}
            logger.error("meta_api_invalid_json", extra={"endpoint": endpoint_label(endpoint)})
            raise HttpError("invalid_json_response", status_code=response.status_code) from exc

        if not isinstance(body, dict):
            if not response.is_success:
                return {}
            raise HttpError("response_not_object", status_code=response.status_code)
        return body


def create_whatsapp_http_client(
    settings: WhatsAppSettings | None = None,
    config: HttpClientConfig | None = None,
) -> WhatsAppHttpClient:
    """Factory para criar cliente WhatsApp a partir das settings.

    Args:
        settings: WhatsAppSettings opcional. Se None, carrega do ambiente.
        config: Configuração HTTP; se None, usa o timeout das settings.

    Returns:
        Cliente HTTP configurado, com RateLimiter próprio.
    """
    # Import local para evitar dependência circular
    from config.settings import get_whatsapp_settings

    whatsapp = settings or get_whatsapp_settings()
    policy = RateLimitPolicy(
        max_requests_per_minute=whatsapp.max_requests_per_minute,
        retry_on_too_many_requests=whatsapp.retry_on_too_many_requests,
        max_retries=whatsapp.max_retries,
        retry_delay_seconds=whatsapp.retry_delay_seconds,
    )
    return WhatsAppHttpClient(
        access_token=whatsapp.access_token,
        base_url=whatsapp.api_endpoint,
        config=config or HttpClientConfig(timeout_seconds=whatsapp.request_timeout_seconds),
        rate_limiter=RateLimiter(policy),
    )
