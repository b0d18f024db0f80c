"""Testes de integração da aplicação FastAPI (TestClient)."""

from __future__ import annotations

import hashlib
import hmac
import json

import pytest
from fastapi.testclient import TestClient

from api.connectors.whatsapp.webhook.dispatcher import WebhookHandlers
from app.app import create_app
from config.settings import WhatsAppSettings

SECRET = "segredo"


@pytest.fixture(autouse=True)
def _dev_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "test")


def _settings() -> WhatsAppSettings:
    return WhatsAppSettings(
        access_token="t",
        phone_number_id="123",
        app_secret=SECRET,
        verify_token="verify-me",
    )


def _signed(body: dict) -> tuple[bytes, dict[str, str]]:
    raw = json.dumps(body).encode("utf-8")
    signature = hmac.new(SECRET.encode("utf-8"), raw, hashlib.sha256).hexdigest()
    return raw, {"X-Hub-Signature-256": f"sha256={signature}", "Content-Type": "application/json"}


def test_handshake_round_trip() -> None:
    with TestClient(create_app(settings=_settings())) as client:
        ok = client.get(
            "/webhook/whatsapp/",
            params={
                "hub.mode": "subscribe",
                "hub.verify_token": "verify-me",
                "hub.challenge": "99",
            },
        )
        denied = client.get(
            "/webhook/whatsapp/",
            params={"hub.mode": "subscribe", "hub.verify_token": "x", "hub.challenge": "99"},
        )

    assert ok.status_code == 200
    assert ok.text == "99"
    assert denied.status_code == 403


def test_post_dispatches_statuses_to_handler() -> None:
    statuses: list = []
    envelope = {
        "entry": [
            {
                "changes": [
                    {
                        "value": {
                            "messaging_product": "whatsapp",
                            "statuses": [
                                {
                                    "id": "wamid.1",
                                    "status": "read",
                                    "timestamp": "1700000000",
                                    "recipient_id": "5511",
                                }
                            ],
                        }
                    }
                ]
            }
        ]
    }
    raw, headers = _signed(envelope)

    app = create_app(WebhookHandlers(on_status=statuses.append), settings=_settings())
    with TestClient(app) as client:
        response = client.post("/webhook/whatsapp/", content=raw, headers=headers)

    assert response.status_code == 200
    assert response.json()["statuses"] == 1
    assert statuses[0].status == "read"


def test_post_with_bad_signature_is_forbidden() -> None:
    with TestClient(create_app(settings=_settings())) as client:
        response = client.post(
            "/webhook/whatsapp/",
            content=b'{"entry": []}',
            headers={"X-Hub-Signature-256": "sha256=00"},
        )

    assert response.status_code == 403


def test_async_handlers_drained_on_shutdown() -> None:
    done: list[str] = []

    async def on_message(message) -> None:
        done.append(message.id)

    envelope = {
        "entry": [
            {
                "changes": [
                    {
                        "value": {
                            "messaging_product": "whatsapp",
                            "messages": [
                                {
                                    "from": "5511",
                                    "id": "wamid.7",
                                    "timestamp": "1700000000",
                                    "type": "text",
                                    "text": {"body": "oi"},
                                }
                            ],
                        }
                    }
                ]
            }
        ]
    }
    raw, headers = _signed(envelope)

    app = create_app(WebhookHandlers(on_message=on_message), settings=_settings())
    with TestClient(app) as client:
        client.post("/webhook/whatsapp/", content=raw, headers=headers)

    assert done == ["wamid.7"]
    assert app.state.webhook_dispatcher.pending_tasks == 0


def test_health_endpoint() -> None:
    with TestClient(create_app(settings=_settings())) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_strict_environment_rejects_invalid_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")

    with pytest.raises(RuntimeError), TestClient(create_app(settings=WhatsAppSettings())):
        pass


def test_custom_webhook_prefix() -> None:
    app = create_app(settings=_settings(), webhook_prefix="/hooks/meta/")
    params = {"hub.mode": "subscribe", "hub.verify_token": "verify-me", "hub.challenge": "7"}

    with TestClient(app) as client:
        assert client.get("/hooks/meta/", params=params).text == "7"
        assert client.get("/webhook/whatsapp/", params=params).status_code == 404


def test_invalid_webhook_prefix_rejected() -> None:
    with pytest.raises(ValueError, match="webhook_prefix"):
        create_app(settings=_settings(), webhook_prefix="hooks")
