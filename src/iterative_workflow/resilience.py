"""Retry, timeout, fallback and circuit-breaker wrappers for async operations.

None of these share state; compose them explicitly, e.g. retry around a
circuit breaker call. Sleeping and clock reads go through the injected
``Time`` so tests never wait.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

from iterative_workflow.gateway.time.abc import Time

logger = logging.getLogger(__name__)

T = TypeVar("T")

AsyncOperation = Callable[[], Awaitable[T]]


@dataclass(frozen=True)
class RetryConfig:
    """Exponential backoff settings. Delays are in seconds.

    ``retry_on`` decides whether an error is worth retrying; when it returns
    False the error is re-raised immediately.
    """

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 10.0
    backoff_multiplier: float = 2.0
    retry_on: Callable[[Exception], bool] | None = None


async def with_retry(
    operation: AsyncOperation[T],
    operation_name: str,
    config: RetryConfig | None = None,
    *,
    time: Time,
) -> T:
    """Run ``operation`` up to ``config.max_retries`` times.

    Raises:
        Exception: The last error once attempts are exhausted, or the first
            non-retryable one.
    """
    cfg = config if config is not None else RetryConfig()
    if cfg.max_retries < 1:
        raise ValueError(f"max_retries must be at least 1, got {cfg.max_retries}")

    delay = cfg.base_delay
    for attempt in range(1, cfg.max_retries + 1):
        try:
            return await operation()
        except Exception as e:
            if cfg.retry_on is not None and not cfg.retry_on(e):
                logger.error(
                    "%s failed with non-retryable error on attempt %d: %s",
                    operation_name,
                    attempt,
                    e,
                )
                raise
            if attempt == cfg.max_retries:
                logger.error("%s failed after %d attempts: %s", operation_name, attempt, e)
                raise
            logger.warning(
                "%s failed (attempt %d/%d), retrying in %gs: %s",
                operation_name,
                attempt,
                cfg.max_retries,
                delay,
                e,
            )
            await time.sleep(delay)
            delay = min(delay * cfg.backoff_multiplier, cfg.max_delay)

    msg = "Retry logic error"
    raise AssertionError(msg)


class OperationTimeoutError(TimeoutError):
    """Raised when an operation does not finish within its time limit."""

    def __init__(self, operation_name: str, timeout: float) -> None:
        self.operation_name = operation_name
        self.timeout = timeout
        super().__init__(f"{operation_name} timed out after {timeout:g}s")


async def with_timeout(operation: Awaitable[T], timeout: float, operation_name: str) -> T:
    """Await ``operation`` for at most ``timeout`` seconds.

    On expiry the operation is cancelled and OperationTimeoutError is raised.
    A TimeoutError raised by the operation itself propagates unchanged.
    """
    try:
        async with asyncio.timeout(timeout) as scope:
            return await operation
    except TimeoutError as e:
        if scope.expired():
            raise OperationTimeoutError(operation_name, timeout) from e
        raise


@dataclass(frozen=True)
class FallbackResult(Generic[T]):
    result: T
    used_fallback: bool


async def with_fallback(
    primary: AsyncOperation[T],
    fallback: AsyncOperation[T],
    should_fallback: Callable[[Exception], bool] | None = None,
) -> FallbackResult[T]:
    """Run ``primary``; on an error ``should_fallback`` accepts, run ``fallback``."""
    try:
        return FallbackResult(result=await primary(), used_fallback=False)
    except Exception as e:
        if should_fallback is not None and not should_fallback(e):
            raise
        logger.warning("Primary operation failed, using fallback: %s", e)
    return FallbackResult(result=await fallback(), used_fallback=True)


@dataclass(frozen=True)
class DegradedResult(Generic[T]):
    result: T
    degraded: bool


async def with_graceful_degradation(
    operation: AsyncOperation[T], default: T, operation_name: str
) -> DegradedResult[T]:
    """Run ``operation``, returning ``default`` instead of raising on failure."""
    try:
        return DegradedResult(result=await operation(), degraded=False)
    except Exception as e:
        logger.warning("%s failed, using default value: %s", operation_name, e)
        return DegradedResult(result=default, degraded=True)


CircuitState = Literal["closed", "open", "half-open"]


@dataclass(frozen=True)
class CircuitBreakerConfig:
    failure_threshold: int = 5
    reset_timeout: float = 30.0
    # Consecutive successes needed in half-open before closing
    half_open_max_attempts: int = 3


class CircuitOpenError(Exception):
    """Raised when a call is rejected because the circuit is open."""

    def __init__(self, operation_name: str) -> None:
        self.operation_name = operation_name
        super().__init__(f"Circuit breaker is open for {operation_name}. Try again later.")


class CircuitBreaker:
    """Stops calling a failing dependency until it has had time to recover.

    closed: calls pass through; ``failure_threshold`` failures open the circuit.
    open: calls are rejected until ``reset_timeout`` has elapsed since the last
    failure, then the circuit goes half-open.
    half-open: any failure reopens; ``half_open_max_attempts`` successes close.
    """

    def __init__(self, config: CircuitBreakerConfig | None = None, *, time: Time) -> None:
        self.config = config if config is not None else CircuitBreakerConfig()
        self._time = time
        self._state: CircuitState = "closed"
        self._failure_count = 0
        self._last_failure_at = 0.0
        self._half_open_successes = 0

    @property
    def state(self) -> CircuitState:
        self._check_state_transition()
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    async def execute(self, operation: AsyncOperation[T], operation_name: str) -> T:
        self._check_state_transition()
        if self._state == "open":
            raise CircuitOpenError(operation_name)
        try:
            result = await operation()
        except Exception:
            self._on_failure()
            raise
        self._on_success()
        return result

    def _check_state_transition(self) -> None:
        if self._state != "open":
            return
        if self._time.monotonic() - self._last_failure_at >= self.config.reset_timeout:
            self._state = "half-open"
            self._half_open_successes = 0
            logger.info("Circuit breaker transitioning to half-open")

    def _on_success(self) -> None:
        if self._state != "half-open":
            self._failure_count = 0
            return
        self._half_open_successes += 1
        if self._half_open_successes >= self.config.half_open_max_attempts:
            self._state = "closed"
            self._failure_count = 0
            logger.info("Circuit breaker closed after successful half-open attempts")

    def _on_failure(self) -> None:
        self._failure_count += 1
        self._last_failure_at = self._time.monotonic()
        if self._state == "half-open":
            self._state = "open"
            logger.warning("Circuit breaker reopened from half-open state")
        elif self._failure_count >= self.config.failure_threshold:
            self._state = "open"
            logger.warning("Circuit breaker opened after %d failures", self._failure_count)

    def reset(self) -> None:
        self._state = "closed"
        self._failure_count = 0
        self._last_failure_at = 0.0
        self._half_open_successes = 0
