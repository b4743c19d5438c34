"""Periodic refresh task.

Runs the pipeline once right away, then on a fixed ``interval`` cadence measured
from the first start (job run time does not shift later runs) until the
task is cancelled on shutdown. A failing run is logged and the loop carries on.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger("kurswatch.scheduler")


class RefreshScheduler:
    def __init__(self, job: Callable[[], Awaitable[object]], interval: float):
        if interval <= 0:
            raise ValueError("interval must be positive seconds")
        self._job = job
        self._interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if self.running:
            return self._task  # type: ignore[return-value]
        self._task = asyncio.create_task(self._loop(), name="kurswatch-refresh")
        logger.info("scheduler started interval=%ss", self._interval)
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("scheduler stopped")

    async def _loop(self) -> None:
        loop = asyncio.get_running_loop()
        next_run = loop.time()
        while True:
            try:
                await self._job()
            except asyncio.CancelledError:
                raise
            except Exception:  # noqa: BLE001
                logger.exception("refresh job raised; next run in %ss", self._interval)
            next_run += self._interval
            now = loop.time()
            if next_run <= now:
                # a run overran whole intervals; skip those ticks, keep the phase
                skipped = int((now - next_run) // self._interval) + 1
                next_run += skipped * self._interval
                logger.warning("refresh overran, skipped %d tick(s)", skipped)
            await asyncio.sleep(next_run - now)
