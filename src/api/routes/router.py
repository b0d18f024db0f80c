"""Montagem do router HTTP do serviço."""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.health.router import router as health_router
from api.routes.whatsapp.router import router as whatsapp_router

WEBHOOK_PREFIX = "/webhook/whatsapp"


def create_api_router(webhook_prefix: str = WEBHOOK_PREFIX) -> APIRouter:
    """Router com /health e o webhook do WhatsApp sob `webhook_prefix`.

    Raises:
        ValueError: Prefixo vazio ou sem "/" inicial
    """
    if not webhook_prefix.startswith("/") or webhook_prefix == "/":
        raise ValueError(f"webhook_prefix inválido: {webhook_prefix!r}")

    api_router = APIRouter()
    api_router.include_router(health_router, tags=["health"])
    api_router.include_router(
        whatsapp_router,
        prefix=webhook_prefix.rstrip("/"),
        tags=["whatsapp"],
    )
    return api_router
