"""Hourly background refresh (cron ``<minute> * * * *``).

A single asyncio task sleeps until the next wall-clock boundary, runs a full
refresh to completion, then sleeps again. Cycles never overlap inside one
process; a cycle that runs past the next boundary skips it.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


def seconds_until_next_run(now: datetime, minute: int = 0) -> float:
    """Seconds from ``now`` to the next HH:<minute>:00, strictly in the future."""
    target = now.replace(minute=minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(hours=1)
    return (target - now).total_seconds()


class RefreshScheduler:
    def __init__(
        self,
        job: Callable[[], Awaitable[object]],
        minute: int = 0,
        clock: Callable[[], datetime] = datetime.now,
    ):
        if not 0 <= minute <= 59:
            raise ValueError(f"minute must be 0-59, got {minute}")
        self.job = job
        self.minute = minute
        self._clock = clock
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> None:
        logger.info("Running scheduled data refresh...")
        try:
            result = await self.job()
        except Exception:
            logger.exception("Scheduled data refresh failed")
            return
        logger.info("Data refresh complete: %s", result)

    async def _loop(self) -> None:
        while True:
            delay = seconds_until_next_run(self._clock(), self.minute)
            logger.debug("Next refresh in %.0fs", delay)
            await asyncio.sleep(delay)
            await self.run_once()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="hourly-refresh")
        logger.info("Refresh scheduler started (minute=%d)", self.minute)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Refresh scheduler stopped")
