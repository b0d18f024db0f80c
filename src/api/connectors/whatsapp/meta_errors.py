"""Erros e helpers de parsing para API Meta/WhatsApp."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .http_base import HttpError

if TYPE_CHECKING:
    from collections.abc import Mapping

HTTP_TOO_MANY_REQUESTS = 429

# Sinais de rate limit da Meta: (error_type, error_code); None = qualquer tipo
RATE_LIMIT_SIGNALS: frozenset[tuple[str | None, int]] = frozenset(
    {
        (None, 4),  # Application request limit reached
        ("OAuthException", 80004),  # Too many calls to this WABA
        (None, 130429),  # Cloud API throughput reached
        (None, 131056),  # Pair rate limit (business -> mesmo usuário)
    }
)


class WhatsAppApiError(Exception):
    """Erro estruturado retornado pela API Meta/WhatsApp."""

    def __init__(
        self,
        message: str,
        error_type: str,
        error_code: int,
        error_subcode: int | None = None,
        fbtrace_id: str | None = None,
        status_code: int | None = None,
        retry_after_seconds: float | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.error_code = error_code
        self.error_subcode = error_subcode
        self.fbtrace_id = fbtrace_id
        self.status_code = status_code
        self.retry_after_seconds = retry_after_seconds

    @property
    def is_permanent(self) -> bool:
        """True se o erro não deve ser retentado."""
        return is_permanent_error(self.error_code, self.error_type)

    def __repr__(self) -> str:
        return (
            f"WhatsAppApiError(error_type={self.error_type!r}, "
            f"error_code={self.error_code!r}, status_code={self.status_code!r})"
        )


def is_permanent_error(error_code: int, error_type: str) -> bool:
    """Classifica erro como permanente ou transitório.

    Erros permanentes: 400, 401, 403, 404, 413
    Erros transitórios: rate limit (ver RATE_LIMIT_SIGNALS), 500+
    """
    if _matches_rate_limit_signal(error_type, error_code):
        return False

    permanent_codes = {400, 401, 403, 404, 413}
    if error_code in permanent_codes:
        return True

    permanent_types = {"OAuthException", "InvalidRequest"}
    return error_type in permanent_types


def is_rate_limit_error(exc: BaseException) -> bool:
    """Indica se a falha significa "too many requests".

    Vale para erros da Meta com código/tipo de rate limit e para
    qualquer resposta HTTP 429, com ou sem corpo de erro.
    """
    if isinstance(exc, WhatsAppApiError):
        if exc.status_code == HTTP_TOO_MANY_REQUESTS:
            return True
        return _matches_rate_limit_signal(exc.error_type, exc.error_code)
    if isinstance(exc, HttpError):
        return exc.status_code == HTTP_TOO_MANY_REQUESTS
    return False


def _matches_rate_limit_signal(error_type: str, error_code: int) -> bool:
    return (error_type, error_code) in RATE_LIMIT_SIGNALS or (
        None,
        error_code,
    ) in RATE_LIMIT_SIGNALS


def parse_retry_after(value: str | None) -> float | None:
    """Converte header Retry-After (segundos inteiros) para float."""
    if value is None:
        return None
    try:
        seconds = int(value.strip())
    except ValueError:
        return None
    if seconds < 0:
        return None
    return float(seconds)


def parse_meta_error(
    response_data: dict[str, Any],
    status_code: int | None = None,
    headers: Mapping[str, str] | None = None,
) -> WhatsAppApiError | None:
    """Extrai informações de erro do response da Meta.

    Args:
        response_data: Dict do response JSON
        status_code: Status HTTP da resposta (quando conhecido)
        headers: Headers da resposta, usados para ler Retry-After

    Returns:
        WhatsAppApiError se houver erro, None se sucesso
    """
    error_obj = response_data.get("error")
    if not error_obj or not isinstance(error_obj, dict):
        return None

    retry_after = None
    if headers is not None:
        retry_after = parse_retry_after(headers.get("retry-after"))

    return WhatsAppApiError(
        message=str(error_obj.get("message", "Erro desconhecido")),
        error_type=str(error_obj.get("type", "unknown")),
        error_code=_as_int(error_obj.get("code"), default=0),
        error_subcode=_as_int(error_obj.get("error_subcode"), default=None),
        fbtrace_id=error_obj.get("fbtrace_id"),
        status_code=status_code,
        retry_after_seconds=retry_after,
    )


def _as_int(value: Any, default: int | None) -> int | None:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    return default
