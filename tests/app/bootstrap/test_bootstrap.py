"""Testes do bootstrap (logging a partir do ambiente e validação de settings)."""

from __future__ import annotations

import logging

import pytest

from app import bootstrap
from config.settings import WhatsAppSettings


def test_initialize_app_reads_log_env(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(bootstrap, "configure_logging", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FORMAT", "Text")

    bootstrap.initialize_app()

    assert calls[0]["level"] == "DEBUG"
    assert calls[0]["json_output"] is False
    assert calls[0]["service_name"] == bootstrap.SERVICE_NAME


def test_initialize_app_defaults_to_json(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(bootstrap, "configure_logging", lambda **kwargs: calls.append(kwargs))
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)

    bootstrap.initialize_app()

    assert calls[0]["level"] == "INFO"
    assert calls[0]["json_output"] is True


def test_valid_settings_return_no_problems(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")
    settings = WhatsAppSettings(access_token="t", phone_number_id="123")

    assert bootstrap.validate_runtime_settings(settings) == []


def test_invalid_settings_only_warn_outside_strict_envs(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    monkeypatch.setenv("ENVIRONMENT", "development")

    with caplog.at_level(logging.WARNING, logger="app.bootstrap"):
        problems = bootstrap.validate_runtime_settings(WhatsAppSettings())

    assert "WHATSAPP_PHONE_NUMBER_ID não configurado" in problems
    assert caplog.records[-1].getMessage() == "settings_validation_failed"


@pytest.mark.parametrize("environment", ["staging", "PRODUCTION"])
def test_invalid_settings_fail_in_strict_envs(
    monkeypatch: pytest.MonkeyPatch,
    environment: str,
) -> None:
    monkeypatch.setenv("ENVIRONMENT", environment)

    with pytest.raises(RuntimeError, match="WHATSAPP_ACCESS_TOKEN"):
        bootstrap.validate_runtime_settings(WhatsAppSettings())


def test_blank_environment_means_development(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "  ")

    assert bootstrap.current_environment() == "development"
