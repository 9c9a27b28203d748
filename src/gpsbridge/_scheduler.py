"""Periodic job runner."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Any

_logger = logging.getLogger(__name__)


class PeriodicRunner:
    """Fire a coroutine every *interval* seconds without overlapping runs.

    Each firing runs as its own task. A firing that comes due while the
    previous run is still in flight is skipped, so a slow cycle delays
    the next one instead of stacking up behind it.
    """

    def __init__(self, name: str, interval: float, job: Callable[[], Awaitable[Any]]) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._name = name
        self._interval = interval
        self._job = job
        self._loop_task: asyncio.Task[None] | None = None
        self._run_task: asyncio.Task[None] | None = None
        self.runs = 0
        self.skipped = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    @property
    def busy(self) -> bool:
        """Whether a run is in flight."""
        return self._run_task is not None and not self._run_task.done()

    def fire(self) -> bool:
        """Start a run now unless one is in flight; return whether it started."""
        if self.busy:
            self.skipped += 1
            _logger.debug("%s still running, skipping this trigger", self._name)
            return False
        self.runs += 1
        self._run_task = asyncio.create_task(self._guarded_run(), name=f"{self._name}-run")
        return True

    async def wait_idle(self) -> None:
        """Wait for the in-flight run, if any, to finish."""
        if self._run_task is not None:
            await asyncio.shield(self._run_task)

    async def _guarded_run(self) -> None:
        try:
            await self._job()
        except asyncio.CancelledError:
            raise
        except Exception:
            # The next trigger is the retry; a failed run must not stop the loop.
            _logger.exception("%s failed", self._name)

    async def _loop(self, initial_delay: float) -> None:
        if initial_delay > 0:
            await asyncio.sleep(initial_delay)
        while True:
            self.fire()
            await asyncio.sleep(self._interval)

    def start(self, *, initial_delay: float = 0.0) -> None:
        """Begin firing, the first time after *initial_delay* seconds."""
        if self.is_running:
            return
        self._loop_task = asyncio.create_task(self._loop(initial_delay), name=f"{self._name}-loop")

    async def stop(self) -> None:
        """Cancel the schedule and any in-flight run."""
        for task in (self._loop_task, self._run_task):
            if task is not None and not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        self._loop_task = None
        self._run_task = None
