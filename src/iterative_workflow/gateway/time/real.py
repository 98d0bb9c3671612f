"""Real time implementation using datetime, time.monotonic() and asyncio.sleep()."""

import asyncio
import time
from datetime import UTC, datetime

from iterative_workflow.gateway.time.abc import Time


class RealTime(Time):
    """Production implementation backed by the system clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def monotonic(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
