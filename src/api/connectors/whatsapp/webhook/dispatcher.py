"""Dispatcher de eventos inbound do webhook WhatsApp.

Percorre entry -> changes -> value.messages / value.statuses e invoca os
handlers registrados, na ordem dos arrays. Entrega é best-effort: cada
ramo malformado é pulado (com motivo enumerável em SkipReason) sem
derrubar o restante do lote.

Handlers assíncronos são agendados como tasks e não são aguardados.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from .models import (
    InboundMessage,
    InboundStatus,
    parse_inbound_message,
    parse_inbound_status,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

WHATSAPP_PRODUCT = "whatsapp"


class SkipReason(StrEnum):
    """Motivos pelos quais um ramo do envelope é ignorado."""

    ENVELOPE_NOT_OBJECT = "envelope_not_object"
    ENTRY_NOT_LIST = "entry_not_list"
    ENTRY_NOT_OBJECT = "entry_not_object"
    CHANGES_NOT_LIST = "changes_not_list"
    CHANGE_NOT_OBJECT = "change_not_object"
    VALUE_NOT_OBJECT = "value_not_object"
    PRODUCT_MISMATCH = "product_mismatch"
    MESSAGES_NOT_LIST = "messages_not_list"
    STATUSES_NOT_LIST = "statuses_not_list"
    MESSAGE_INVALID = "message_invalid"
    STATUS_INVALID = "status_invalid"


@dataclass(frozen=True)
class WebhookHandlers:
    """Callbacks do chamador; ambos opcionais, sync ou async."""

    on_message: Callable[[InboundMessage], Awaitable[None] | None] | None = None
    on_status: Callable[[InboundStatus], Awaitable[None] | None] | None = None


@dataclass
class DispatchSummary:
    """Resumo de um dispatch (para logs e testes)."""

    messages: int = 0
    statuses: int = 0
    handler_errors: int = 0
    skipped: list[SkipReason] = field(default_factory=list)


class WebhookDispatcher:
    """Fan-out de envelopes do webhook para handlers tipados.

    Args:
        handlers: Handlers padrão, usados quando dispatch() não recebe outros
        product: Valor esperado em value.messaging_product
    """

    def __init__(
        self,
        handlers: WebhookHandlers | None = None,
        product: str = WHATSAPP_PRODUCT,
    ) -> None:
        self._handlers = handlers or WebhookHandlers()
        self._product = product
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def pending_tasks(self) -> int:
        return len(self._pending)

    def dispatch(
        self,
        envelope: Any,
        handlers: WebhookHandlers | None = None,
    ) -> DispatchSummary:
        """Despacha mensagens e status do envelope para os handlers.

        Nunca levanta exceção por envelope malformado nem por falha de handler.
        """
        active = handlers or self._handlers
        summary = DispatchSummary()

        if not isinstance(envelope, dict):
            summary.skipped.append(SkipReason.ENVELOPE_NOT_OBJECT)
            return self._finish(summary)

        entries = envelope.get("entry")
        if not isinstance(entries, list):
            summary.skipped.append(SkipReason.ENTRY_NOT_LIST)
            return self._finish(summary)

        for entry in entries:
            if not isinstance(entry, dict):
                summary.skipped.append(SkipReason.ENTRY_NOT_OBJECT)
                continue
            changes = entry.get("changes")
            if not isinstance(changes, list):
                summary.skipped.append(SkipReason.CHANGES_NOT_LIST)
                continue
            for change in changes:
                self._dispatch_change(change, active, summary)

        return self._finish(summary)

    def _dispatch_change(
        self,
        change: Any,
        handlers: WebhookHandlers,
        summary: DispatchSummary,
    ) -> None:
        if not isinstance(change, dict):
            summary.skipped.append(SkipReason.CHANGE_NOT_OBJECT)
            return
        value = change.get("value")
        if not isinstance(value, dict):
            summary.skipped.append(SkipReason.VALUE_NOT_OBJECT)
            return
        if value.get("messaging_product") != self._product:
            summary.skipped.append(SkipReason.PRODUCT_MISMATCH)
            return

        messages = value.get("messages")
        if messages is not None and not isinstance(messages, list):
            summary.skipped.append(SkipReason.MESSAGES_NOT_LIST)
        elif messages and handlers.on_message is not None:
            for raw in messages:
                message = parse_inbound_message(raw)
                if message is None:
                    summary.skipped.append(SkipReason.MESSAGE_INVALID)
                    continue
                summary.messages += 1
                self._invoke(handlers.on_message, message, summary)

        statuses = value.get("statuses")
        if statuses is not None and not isinstance(statuses, list):
            summary.skipped.append(SkipReason.STATUSES_NOT_LIST)
        elif statuses and handlers.on_status is not None:
            for raw in statuses:
                status = parse_inbound_status(raw)
                if status is None:
                    summary.skipped.append(SkipReason.STATUS_INVALID)
                    continue
                summary.statuses += 1
                self._invoke(handlers.on_status, status, summary)

    def _invoke(
        self,
        handler: Callable[[Any], Awaitable[None] | None],
        event: InboundMessage | InboundStatus,
        summary: DispatchSummary,
    ) -> None:
        try:
            result = handler(event)
        except Exception:
            summary.handler_errors += 1
            logger.exception(
                "webhook_handler_failed",
                extra={"channel": "whatsapp", "event_id": event.id},
            )
            return
        if inspect.isawaitable(result):
            self._schedule(result)

    def _schedule(self, awaitable: Awaitable[Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Sem event loop (contexto síncrono): executa até o fim
            try:
                asyncio.run(_await(awaitable))
            except Exception:
                logger.exception("webhook_handler_failed", extra={"channel": "whatsapp"})
            return
        task = loop.create_task(_await(awaitable))
        self._pending.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        with contextlib.suppress(asyncio.CancelledError):
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "webhook_handler_task_failed",
                    extra={
                        "channel": "whatsapp",
                        "error_type": type(exc).__name__,
                        "pending_tasks": len(self._pending),
                    },
                )

    async def drain(self, timeout_seconds: float = 30.0) -> None:
        """Aguarda handlers pendentes (shutdown); cancela os que excederem o timeout."""
        if not self._pending:
            return

        pending_now = list(self._pending)
        logger.info(
            "webhook_handlers_drain_wait",
            extra={"pending_tasks": len(pending_now), "timeout_seconds": timeout_seconds},
        )
        _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
        if not pending:
            return

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning(
            "webhook_handlers_drain_cancelled",
            extra={"cancelled_tasks": len(pending)},
        )

    def _finish(self, summary: DispatchSummary) -> DispatchSummary:
        logger.info(
            "webhook_dispatched",
            extra={
                "channel": "whatsapp",
                "messages": summary.messages,
                "statuses": summary.statuses,
                "handler_errors": summary.handler_errors,
                "skipped": [reason.value for reason in summary.skipped],
            },
        )
        return summary


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


_default_dispatcher = WebhookDispatcher()


def dispatch_webhook_event(
    envelope: Any,
    handlers: WebhookHandlers,
) -> DispatchSummary:
    """Atalho para despachar um envelope com o dispatcher padrão do módulo."""
    return _default_dispatcher.dispatch(envelope, handlers)


async def drain_webhook_handlers(timeout_seconds: float = 30.0) -> None:
    """Aguarda handlers agendados via dispatch_webhook_event()."""
    await _default_dispatcher.drain(timeout_seconds)
