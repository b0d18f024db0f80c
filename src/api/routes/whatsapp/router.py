"""Router principal do WhatsApp: agrega os endpoints do canal."""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.whatsapp.webhook import router as webhook_router

router = APIRouter()

# Webhook endpoints (GET para challenge, POST para eventos)
router.include_router(webhook_router)
