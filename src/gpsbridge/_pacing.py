"""Fixed-interval request gate."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable


class RateGate:
    """Enforce a minimum spacing between successive :meth:`wait` returns.

    The clock and sleep functions are injectable so pacing can be
    checked without real delays.
    """

    def __init__(
        self,
        min_interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if min_interval < 0:
            raise ValueError(f"min_interval must not be negative, got {min_interval}")
        self._min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last: float | None = None
        self._lock = asyncio.Lock()

    @property
    def min_interval(self) -> float:
        return self._min_interval

    async def wait(self) -> None:
        """Return once at least ``min_interval`` has passed since the last return."""
        async with self._lock:
            if self._last is not None and self._min_interval > 0:
                delay = self._last + self._min_interval - self._clock()
                if delay > 0:
                    await self._sleep(delay)
            self._last = self._clock()
