"""Rotas HTTP da API.

Responsabilidades:
- Endpoints de webhook do WhatsApp (verify e receive)
- Liveness (/health)
- Respostas HTTP apropriadas para falhas de assinatura e JSON
"""

from __future__ import annotations

from api.routes.router import WEBHOOK_PREFIX, create_api_router

__all__ = ["WEBHOOK_PREFIX", "create_api_router"]
