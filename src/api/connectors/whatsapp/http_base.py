"""Cliente HTTP base (transporte) para o conector WhatsApp.

Não faz retry: a política de repetição pertence ao RateLimiter,
que envolve cada chamada lógica.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True
    # Permite injetar httpx.MockTransport em testes
    transport: httpx.AsyncBaseTransport | None = None


class HttpError(Exception):
    """Falha de transporte sem corpo de erro da Meta (sem dados sensíveis)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        retry_after_seconds: float | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retry_after_seconds = retry_after_seconds


class HttpClient:
    """Cliente HTTP simples para chamadas externas."""

    def __init__(self, config: HttpClientConfig | None = None) -> None:
        self._config = config or HttpClientConfig()

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        merged_headers = {**self._config.default_headers, **(headers or {})}
        try:
            async with httpx.AsyncClient(
                verify=self._config.verify_ssl,
                transport=self._config.transport,
            ) as client:
                return await client.request(
                    method,
                    url,
                    json=json,
                    params=params,
                    data=data,
                    files=files,
                    headers=merged_headers,
                    timeout=self._config.timeout_seconds,
                )
        except httpx.TransportError as exc:
            logger.warning(
                "http_connection_error",
                extra={"method": method, "error_type": type(exc).__name__},
            )
            raise HttpError("http_connection_error") from exc
