"""Testes do controle de admissão e retry com backoff."""

from __future__ import annotations

import asyncio

import pytest

from api.connectors.whatsapp.http_base import HttpError
from api.connectors.whatsapp.meta_errors import WhatsAppApiError
from api.connectors.whatsapp.rate_limiter import RateLimiter, RateLimitPolicy, RetryState


def _throughput_error() -> WhatsAppApiError:
    return WhatsAppApiError("Throughput reached", "OAuthException", 130429, status_code=400)


def _limiter(fake_clock, **policy_kwargs) -> RateLimiter:
    return RateLimiter(
        RateLimitPolicy(**policy_kwargs),
        clock=fake_clock,
        sleep=fake_clock.sleep,
    )


class _Operation:
    """Operação que falha com os erros da fila e depois retorna "ok"."""

    def __init__(self, *errors: Exception) -> None:
        self._errors = list(errors)
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self._errors:
            raise self._errors.pop(0)
        return "ok"


class TestRateLimitPolicy:
    def test_defaults(self) -> None:
        policy = RateLimitPolicy()
        assert policy.max_requests_per_minute == 250
        assert policy.retry_on_too_many_requests is True
        assert policy.max_retries == 3
        assert policy.retry_delay_seconds == 1.0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_requests_per_minute": 0},
            {"max_retries": -1},
            {"retry_delay_seconds": -0.5},
            {"window_seconds": 0},
        ],
    )
    def test_invalid_values_raise(self, kwargs) -> None:
        with pytest.raises(ValueError):
            RateLimitPolicy(**kwargs)

    def test_retry_state_next_attempt(self) -> None:
        state = RetryState().next_attempt(5.0)
        assert state.attempt == 1
        assert state.retry_after_seconds == 5.0
        assert state.next_attempt().retry_after_seconds is None


class TestAdmission:
    @pytest.mark.asyncio
    async def test_third_call_waits_for_window(self, fake_clock) -> None:
        """Teto 2: a terceira chamada espera a janela de 60s."""
        limiter = _limiter(fake_clock, max_requests_per_minute=2)

        await limiter.acquire()
        await limiter.acquire()
        assert fake_clock.sleeps == []

        await limiter.acquire()
        assert fake_clock.sleeps == [60.0]
        assert limiter.current_usage() == 1

    @pytest.mark.asyncio
    async def test_wait_uses_oldest_timestamp(self, fake_clock) -> None:
        limiter = _limiter(fake_clock, max_requests_per_minute=2)

        await limiter.acquire()
        fake_clock.now = 20.0
        await limiter.acquire()
        fake_clock.now = 30.0
        await limiter.acquire()

        # Mais antigo em t=0 expira em t=60
        assert fake_clock.sleeps == [30.0]

    @pytest.mark.asyncio
    async def test_concurrent_callers_do_not_exceed_ceiling(self, fake_clock) -> None:
        limiter = _limiter(fake_clock, max_requests_per_minute=2)

        await asyncio.gather(limiter.acquire(), limiter.acquire(), limiter.acquire())

        assert fake_clock.sleeps == [60.0]

    @pytest.mark.asyncio
    async def test_instances_do_not_share_state(self, fake_clock) -> None:
        first = _limiter(fake_clock, max_requests_per_minute=1)
        second = _limiter(fake_clock, max_requests_per_minute=1)

        await first.acquire()
        await second.acquire()

        assert fake_clock.sleeps == []
        assert first.current_usage() == 1
        assert second.current_usage() == 1

    def test_usage_prunes_expired_entries(self, fake_clock) -> None:
        limiter = _limiter(fake_clock)
        asyncio.run(limiter.acquire())
        fake_clock.now = 60.0
        assert limiter.current_usage() == 0

    @pytest.mark.asyncio
    async def test_failed_attempts_count_toward_window(self, fake_clock) -> None:
        """Timestamp entra na admissão; falha não devolve a vaga."""
        limiter = _limiter(fake_clock, max_requests_per_minute=2)

        for _ in range(2):
            with pytest.raises(HttpError):
                await limiter.execute(_Operation(HttpError("http_status_500", status_code=500)))
        assert limiter.current_usage() == 2

        assert await limiter.execute(_Operation()) == "ok"
        assert fake_clock.sleeps == [60.0]

    def test_pending_requests_matches_usage(self, fake_clock) -> None:
        limiter = _limiter(fake_clock)
        asyncio.run(limiter.acquire())

        assert limiter.pending_requests == 1
        fake_clock.now = 60.0
        assert limiter.pending_requests == 0


class TestRetry:
    @pytest.mark.asyncio
    async def test_success_passes_through(self, fake_clock) -> None:
        limiter = _limiter(fake_clock)
        operation = _Operation()

        assert await limiter.execute(operation) == "ok"
        assert operation.calls == 1
        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_exponential_backoff_then_gives_up(self, fake_clock) -> None:
        """max_retries=3, base 1s: delays 1, 2, 4 e 4 tentativas no total."""
        limiter = _limiter(fake_clock)
        final_error = _throughput_error()
        operation = _Operation(
            _throughput_error(), _throughput_error(), _throughput_error(), final_error
        )

        with pytest.raises(WhatsAppApiError) as exc_info:
            await limiter.execute(operation)

        assert exc_info.value is final_error
        assert operation.calls == 4
        assert fake_clock.sleeps == [1.0, 2.0, 4.0]
        # Cada tentativa consome uma admissão
        assert limiter.current_usage() == 4

    @pytest.mark.asyncio
    async def test_recovers_after_retry(self, fake_clock) -> None:
        limiter = _limiter(fake_clock)
        operation = _Operation(_throughput_error())

        assert await limiter.execute(operation) == "ok"
        assert operation.calls == 2
        assert fake_clock.sleeps == [1.0]

    @pytest.mark.asyncio
    async def test_non_rate_limit_error_is_not_retried(self, fake_clock) -> None:
        limiter = _limiter(fake_clock)
        error = WhatsAppApiError("Invalid token", "OAuthException", 190, status_code=401)
        operation = _Operation(error)

        with pytest.raises(WhatsAppApiError) as exc_info:
            await limiter.execute(operation)

        assert exc_info.value is error
        assert operation.calls == 1
        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_unexpected_exception_propagates(self, fake_clock) -> None:
        limiter = _limiter(fake_clock)
        operation = _Operation(RuntimeError("boom"))

        with pytest.raises(RuntimeError):
            await limiter.execute(operation)
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_retry_disabled(self, fake_clock) -> None:
        limiter = _limiter(fake_clock, retry_on_too_many_requests=False)
        operation = _Operation(_throughput_error())

        with pytest.raises(WhatsAppApiError):
            await limiter.execute(operation)
        assert operation.calls == 1
        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_zero_retries_means_single_attempt(self, fake_clock) -> None:
        limiter = _limiter(fake_clock, max_retries=0)
        operation = _Operation(_throughput_error())

        with pytest.raises(WhatsAppApiError):
            await limiter.execute(operation)
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_http_429_with_retry_after_seeds_backoff(self, fake_clock) -> None:
        limiter = _limiter(fake_clock)
        operation = _Operation(
            HttpError("http_status_429", status_code=429, retry_after_seconds=5.0),
            HttpError("http_status_429", status_code=429, retry_after_seconds=5.0),
        )

        assert await limiter.execute(operation) == "ok"
        assert fake_clock.sleeps == [5.0, 10.0]

    @pytest.mark.asyncio
    async def test_http_500_is_not_retried(self, fake_clock) -> None:
        limiter = _limiter(fake_clock)
        operation = _Operation(HttpError("http_status_500", status_code=500))

        with pytest.raises(HttpError):
            await limiter.execute(operation)
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_alias_execute_with_rate_limit(self, fake_clock) -> None:
        limiter = _limiter(fake_clock)
        assert await limiter.execute_with_rate_limit(_Operation()) == "ok"

    def test_backoff_delay_custom_base(self, fake_clock) -> None:
        limiter = _limiter(fake_clock, retry_delay_seconds=0.5)
        assert limiter.backoff_delay(RetryState(attempt=1)) == 0.5
        assert limiter.backoff_delay(RetryState(attempt=3)) == 2.0
        assert limiter.backoff_delay(RetryState(attempt=2, retry_after_seconds=3.0)) == 6.0
