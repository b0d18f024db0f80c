"""Controle de admissão (rate limiter) para chamadas à Graph API.

Cada chamada lógica passa por:
1. Admissão em janela deslizante (só atrasa, nunca rejeita)
2. Execução da operação
3. Classificação da falha (rate limit vs demais erros)
4. Retry com backoff exponencial, limitado por max_retries

O estado (timestamps) é privado de cada instância; não há coordenação
entre instâncias ou processos.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from .http_base import HttpError
from .meta_errors import WhatsAppApiError, is_rate_limit_error

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Limite padrão de chamadas por minuto do WhatsApp
DEFAULT_MAX_REQUESTS_PER_MINUTE = 250
DEFAULT_WINDOW_SECONDS = 60.0


@dataclass(frozen=True)
class RateLimitPolicy:
    """Política imutável de admissão e retry.

    Attributes:
        max_requests_per_minute: Máximo de admissões na janela deslizante
        retry_on_too_many_requests: Se falhas de rate limit são retentadas
        max_retries: Máximo de retries por chamada lógica
        retry_delay_seconds: Delay base do backoff
        window_seconds: Duração da janela deslizante
    """

    max_requests_per_minute: int = DEFAULT_MAX_REQUESTS_PER_MINUTE
    retry_on_too_many_requests: bool = True
    max_retries: int = 3
    retry_delay_seconds: float = 1.0
    window_seconds: float = DEFAULT_WINDOW_SECONDS

    def __post_init__(self) -> None:
        # Teto 0 travaria toda admissão: rejeitado na construção
        if self.max_requests_per_minute < 1:
            raise ValueError("max_requests_per_minute deve ser >= 1")
        if self.max_retries < 0:
            raise ValueError("max_retries deve ser >= 0")
        if self.retry_delay_seconds < 0:
            raise ValueError("retry_delay_seconds deve ser >= 0")
        if self.window_seconds <= 0:
            raise ValueError("window_seconds deve ser > 0")


@dataclass(frozen=True)
class RetryState:
    """Estado de retry de uma chamada lógica.

    Attributes:
        attempt: Número de retries já agendados (0 = primeira tentativa)
        retry_after_seconds: Delay sugerido pela Meta na última falha
    """

    attempt: int = 0
    retry_after_seconds: float | None = None

    def next_attempt(self, retry_after_seconds: float | None = None) -> RetryState:
        return RetryState(
            attempt=self.attempt + 1,
            retry_after_seconds=retry_after_seconds,
        )


class RateLimiter:
    """Janela deslizante + retry com backoff exponencial.

    Args:
        policy: Política de admissão/retry
        clock: Relógio monotônico em segundos (injetável em testes)
        sleep: Função de espera assíncrona (injetável em testes)
    """

    def __init__(
        self,
        policy: RateLimitPolicy | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._policy = policy or RateLimitPolicy()
        self._clock = clock
        self._sleep = sleep
        self._timestamps: deque[float] = deque()

    @property
    def policy(self) -> RateLimitPolicy:
        return self._policy

    def current_usage(self) -> int:
        """Quantidade de admissões dentro da janela atual."""
        self._prune(self._clock())
        return len(self._timestamps)

    @property
    def pending_requests(self) -> int:
        """Alias de current_usage() para introspecção."""
        return self.current_usage()

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Executa a operação sob admissão e política de retry.

        Args:
            operation: Callable sem argumentos que faz uma chamada remota

        Returns:
            Resultado da operação

        Raises:
            WhatsAppApiError | HttpError: Falha final, inalterada, quando não
                retentável ou após esgotar os retries
        """
        state = RetryState()
        while True:
            await self.acquire()
            try:
                return await operation()
            except (WhatsAppApiError, HttpError) as exc:
                if not self._should_retry(exc, state):
                    raise
                state = state.next_attempt(getattr(exc, "retry_after_seconds", None))
                delay = self.backoff_delay(state)
                logger.warning(
                    "rate_limit_retry_scheduled",
                    extra={
                        "attempt": state.attempt,
                        "max_retries": self._policy.max_retries,
                        "delay_seconds": delay,
                        "error_type": type(exc).__name__,
                    },
                )
                await self._sleep(delay)

    # Nome equivalente ao contrato público original
    execute_with_rate_limit = execute

    async def acquire(self) -> None:
        """Aguarda até haver vaga na janela e registra a admissão.

        Prune, checagem e registro acontecem sem ponto de suspensão entre
        eles; coroutines concorrentes reavaliam a janela após acordar.
        """
        while True:
            now = self._clock()
            self._prune(now)
            if len(self._timestamps) < self._policy.max_requests_per_minute:
                self._timestamps.append(now)
                return

            wait = self._policy.window_seconds - (now - self._timestamps[0])
            if wait > 0:
                logger.info(
                    "rate_limit_wait",
                    extra={
                        "wait_seconds": round(wait, 3),
                        "requests_in_window": len(self._timestamps),
                    },
                )
                await self._sleep(wait)

    def backoff_delay(self, state: RetryState) -> float:
        """Delay do retry `state.attempt` (1-indexado).

        Base = Retry-After da Meta, se houver; senão o delay configurado.
        Multiplicado por 2^(attempt-1).
        """
        base = (
            state.retry_after_seconds
            if state.retry_after_seconds is not None
            else self._policy.retry_delay_seconds
        )
        return base * (2 ** max(state.attempt - 1, 0))

    def _should_retry(self, exc: BaseException, state: RetryState) -> bool:
        if not self._policy.retry_on_too_many_requests:
            return False
        if not is_rate_limit_error(exc):
            return False
        if state.attempt >= self._policy.max_retries:
            logger.error(
                "rate_limit_retries_exhausted",
                extra={"attempts": state.attempt + 1, "max_retries": self._policy.max_retries},
            )
            return False
        return True

    def _prune(self, now: float) -> None:
        cutoff = now - self._policy.window_seconds
        while self._timestamps and self._timestamps[0] <= cutoff:
            self._timestamps.popleft()
