"""correlation_id por requisição, propagado para os logs.

Usa ContextVar, portanto é isolado por task asyncio.

Uso:
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        ...
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import re
import uuid
from contextvars import ContextVar, Token

# IDs recebidos de fora só são aceitos neste formato
MAX_CORRELATION_ID_LENGTH = 128
_VALID_CORRELATION_ID = re.compile(r"[A-Za-z0-9._:\-]+")

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual ("" se não definido)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id do contexto.

    Valores ausentes, longos demais ou com caracteres fora de
    [A-Za-z0-9._:-] são substituídos por um UUID novo.

    Returns:
        Token para reset via reset_correlation_id().
    """
    return _correlation_id.set(normalize_correlation_id(correlation_id))


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


def normalize_correlation_id(value: str | None) -> str:
    candidate = (value or "").strip()
    if (
        not candidate
        or len(candidate) > MAX_CORRELATION_ID_LENGTH
        or not _VALID_CORRELATION_ID.fullmatch(candidate)
    ):
        return generate_correlation_id()
    return candidate


def generate_correlation_id() -> str:
    return str(uuid.uuid4())
