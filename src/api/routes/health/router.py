"""Endpoint de liveness do serviço."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter()

SERVICE_NAME = "whatsapp-cloud"


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    pending_handlers: int = 0


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness check; inclui handlers de webhook ainda em execução."""
    dispatcher = getattr(request.app.state, "webhook_dispatcher", None)
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        timestamp=datetime.now(UTC).isoformat(),
        pending_handlers=dispatcher.pending_tasks if dispatcher is not None else 0,
    )
