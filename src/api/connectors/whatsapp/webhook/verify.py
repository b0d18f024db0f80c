"""Verificação de webhook exigida pela Meta (handshake hub.challenge)."""

from __future__ import annotations

SUBSCRIBE_MODE = "subscribe"


def verify_webhook_challenge(
    hub_mode: str | None,
    hub_verify_token: str | None,
    hub_challenge: str | None,
    expected_token: str | None,
) -> str | None:
    """Valida challenge de webhook e retorna o conteúdo a ser respondido.

    Args:
        hub_mode: Valor de hub.mode
        hub_verify_token: Valor de hub.verify_token
        hub_challenge: Valor de hub.challenge
        expected_token: Token configurado no servidor

    Returns:
        O challenge inalterado (vazio se ausente), ou None se o token não
        estiver configurado, o modo não for "subscribe" ou o token divergir.
        O chamador traduz None em 403.
    """
    if not expected_token:
        return None

    if hub_mode != SUBSCRIBE_MODE or hub_verify_token != expected_token:
        return None

    return hub_challenge or ""
