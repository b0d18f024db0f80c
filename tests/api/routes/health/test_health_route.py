"""Testes do endpoint de liveness."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from starlette.requests import Request

from api.connectors.whatsapp.webhook.dispatcher import WebhookDispatcher
from api.routes.health.router import SERVICE_NAME, health_check


def _build_request_with_state(state: SimpleNamespace) -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/health",
        "raw_path": b"/health",
        "query_string": b"",
        "headers": [],
        "app": SimpleNamespace(state=state),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


@pytest.mark.asyncio
async def test_health_check_reports_pending_handlers() -> None:
    request = _build_request_with_state(SimpleNamespace(webhook_dispatcher=WebhookDispatcher()))

    response = await health_check(request)

    assert response.status == "healthy"
    assert response.service == SERVICE_NAME
    assert response.pending_handlers == 0


@pytest.mark.asyncio
async def test_health_check_without_dispatcher() -> None:
    response = await health_check(_build_request_with_state(SimpleNamespace()))
    assert response.pending_handlers == 0
