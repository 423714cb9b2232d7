"""AutoBookScheduler - periodic pass trigger running inside the app process.

One asyncio task loops: run a pass, then wait `interval` seconds or until
stop() is called. A failed pass is logged and the loop keeps going; the next
tick retries everything still ACTIVE.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from src.bk_processing.domain.models import ProcessingSummary

logger = logging.getLogger(__name__)

PassRunner = Callable[[], Awaitable[ProcessingSummary]]


class AutoBookScheduler:
    def __init__(self, run: PassRunner, interval_seconds: float) -> None:
        self._run = run
        self._interval = interval_seconds
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._loop(), name="autobook-scheduler")
        logger.info("Auto-book scheduler started (interval=%ss)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stop_event.set()
        try:
            await self._task
        finally:
            self._task = None
        logger.info("Auto-book scheduler stopped")

    async def run_once(self) -> ProcessingSummary | None:
        """Run a single pass; returns None if it failed."""
        try:
            return await self._run()
        except Exception:
            logger.exception("Scheduled auto-book pass failed")
            return None

    async def _loop(self) -> None:
        while not self._stop_event.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                continue
