"""Fake Time implementation for testing.

FakeTime keeps a single clock shared by now(), monotonic() and sleep().
Sleeping advances the clock instantly and is recorded in ``sleep_calls``.
"""

import asyncio
from datetime import UTC, datetime, timedelta

from iterative_workflow.gateway.time.abc import Time

DEFAULT_START = datetime(2024, 1, 15, 14, 30, 0, tzinfo=UTC)


class FakeTime(Time):
    """In-memory clock that only moves when told to."""

    def __init__(self, start: datetime = DEFAULT_START) -> None:
        self._start = start
        self._elapsed = 0.0
        self._sleep_calls: list[float] = []

    @property
    def sleep_calls(self) -> list[float]:
        """Durations passed to sleep(), in call order."""
        return list(self._sleep_calls)

    def advance(self, seconds: float) -> None:
        """Move the clock forward without recording a sleep."""
        self._elapsed += seconds

    def now(self) -> datetime:
        return self._start + timedelta(seconds=self._elapsed)

    def monotonic(self) -> float:
        return self._elapsed

    async def sleep(self, seconds: float) -> None:
        self._sleep_calls.append(seconds)
        self._elapsed += seconds
        # Yield so concurrently scheduled tasks still get a turn
        await asyncio.sleep(0)
