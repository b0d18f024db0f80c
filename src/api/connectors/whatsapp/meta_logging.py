"""Log de desfecho das chamadas à Graph API (sem PII).

Um único evento por tentativa HTTP: `meta_api_call`. O nível segue o
desfecho (DEBUG sucesso, WARNING erro) e o endpoint é logado com IDs
mascarados, porque phone_number_id, WABA e wamid identificam o cliente.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .meta_errors import WhatsAppApiError

logger = logging.getLogger(__name__)

ID_PLACEHOLDER = "{id}"

# Segmentos numéricos longos (phone/WABA/media IDs) e wamids
_ID_SEGMENT = re.compile(r"^(?:\d{5,}|wamid\..+)$")


def endpoint_label(path: str) -> str:
    """Troca segmentos que são IDs por `{id}`, mantendo o formato da rota.

    >>> endpoint_label("1234567890/messages")
    '{id}/messages'
    """
    segments = path.strip("/").split("/")
    return "/".join(ID_PLACEHOLDER if _ID_SEGMENT.match(seg) else seg for seg in segments)


def log_api_call(
    method: str,
    path: str,
    status_code: int,
    elapsed_ms: float,
    meta_error: WhatsAppApiError | None = None,
) -> None:
    """Loga uma tentativa HTTP já respondida.

    Só códigos e metadados da Meta entram no log; mensagens de erro e
    corpos nunca são incluídos.
    """
    extra: dict[str, object] = {
        "method": method.upper(),
        "endpoint": endpoint_label(path),
        "status_code": status_code,
        "elapsed_ms": round(elapsed_ms, 1),
    }
    if meta_error is not None:
        extra.update(
            error_type=meta_error.error_type,
            error_code=meta_error.error_code,
            error_subcode=meta_error.error_subcode,
            fbtrace_id=meta_error.fbtrace_id,
            is_permanent=meta_error.is_permanent,
        )

    failed = meta_error is not None or not 200 <= status_code < 300
    logger.log(logging.WARNING if failed else logging.DEBUG, "meta_api_call", extra=extra)
