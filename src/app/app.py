"""Entrypoint do serviço de webhook WhatsApp Cloud.

Expõe a aplicação ASGI (FastAPI) com as rotas de webhook e health.

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.connectors.whatsapp.webhook.dispatcher import WebhookDispatcher, WebhookHandlers
from api.routes import WEBHOOK_PREFIX, create_api_router
from app.bootstrap import SERVICE_NAME, initialize_app, validate_runtime_settings
from config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from config.settings import WhatsAppSettings

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

# Tempo máximo de espera por handlers pendentes no shutdown
SHUTDOWN_DRAIN_TIMEOUT_SECONDS = 30.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup: valida configurações.
    Shutdown: aguarda handlers de webhook ainda em execução.
    """
    logger.info("app_starting", extra={"service": SERVICE_NAME})
    validate_runtime_settings(app.state.whatsapp_settings)

    yield

    logger.info("app_shutting_down", extra={"service": SERVICE_NAME})
    await app.state.webhook_dispatcher.drain(timeout_seconds=SHUTDOWN_DRAIN_TIMEOUT_SECONDS)


def create_app(
    handlers: WebhookHandlers | None = None,
    settings: WhatsAppSettings | None = None,
    webhook_prefix: str = WEBHOOK_PREFIX,
) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        handlers: Callbacks de mensagens e status do webhook
        settings: WhatsAppSettings; se None, carrega do ambiente na requisição
        webhook_prefix: Caminho do webhook registrado no app da Meta

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="WhatsApp Cloud Webhook",
        description="Recebimento e despacho de eventos da WhatsApp Cloud API",
        version="1.0.0",
        lifespan=lifespan,
    )
    fastapi_app.state.whatsapp_settings = settings
    fastapi_app.state.webhook_dispatcher = WebhookDispatcher(handlers)

    fastapi_app.include_router(create_api_router(webhook_prefix))

    logger.info("app_configured", extra={"service": SERVICE_NAME})
    return fastapi_app


# Aplicação ASGI exposta para uvicorn (sem handlers: eventos só são logados)
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("Starting whatsapp-cloud in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
