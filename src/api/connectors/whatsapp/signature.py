"""Validação de assinatura HMAC do webhook (X-Hub-Signature-256).

A checagem é opt-in: sem app secret configurado toda assinatura é aceita.
Falhas são resultados (bool/SignatureResult), nunca exceções.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

SIGNATURE_HEADER = "x-hub-signature-256"
SUPPORTED_ALGORITHMS = frozenset({"sha1", "sha256", "sha384", "sha512"})


@dataclass(frozen=True)
class SignatureResult:
    """Resultado da validação de assinatura."""

    valid: bool
    skipped: bool = False
    error: str | None = None


def validate_signature(
    signature_header: str | None,
    raw_body: bytes | str,
    secret: str | bytes | None,
) -> bool:
    """Valida assinatura no formato "algoritmo=hexdigest".

    Args:
        signature_header: Valor do header (ex: "sha256=ab12...")
        raw_body: Corpo bruto exato da requisição (nunca re-serializado)
        secret: App secret; None/vazio desabilita a checagem

    Returns:
        True se assinatura válida ou checagem desabilitada
    """
    if not secret:
        return True

    if not signature_header or "=" not in signature_header:
        return False

    algorithm, _, received_digest = signature_header.strip().partition("=")
    algorithm = algorithm.lower()
    if not received_digest or algorithm not in SUPPORTED_ALGORITHMS:
        return False

    key = secret.encode("utf-8") if isinstance(secret, str) else secret
    body = raw_body.encode("utf-8") if isinstance(raw_body, str) else raw_body
    computed = hmac.new(key, body, getattr(hashlib, algorithm)).hexdigest()
    # compare_digest com str rejeita não-ASCII; compara bytes
    return hmac.compare_digest(computed.encode("ascii"), received_digest.encode("utf-8"))


def verify_meta_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
) -> SignatureResult:
    """Valida assinatura do webhook a partir dos headers recebidos.

    Args:
        raw_body: Corpo bruto do request
        headers: Headers recebidos (lookup case-insensitive)
        secret: App secret configurado

    Returns:
        SignatureResult com motivo da falha, quando houver
    """
    if not secret:
        return SignatureResult(valid=True, skipped=True)

    signature = _find_header(headers, SIGNATURE_HEADER)
    if not signature:
        return SignatureResult(valid=False, error="missing_signature")

    if not validate_signature(signature, raw_body, secret):
        return SignatureResult(valid=False, error="invalid_signature")

    return SignatureResult(valid=True)


def _find_header(headers: Mapping[str, str], name: str) -> str | None:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None
