"""Periodic eviction of expired weather cache entries."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..utils.weather_cache import WeatherCache

logger = logging.getLogger(__name__)


class CacheSweeper:
    """Owns the background task that calls ``cache.sweep()`` on an interval.

    ``start`` must be called from a running event loop; ``stop`` cancels the
    task and waits for it to finish.
    """

    def __init__(self, cache: WeatherCache, interval_seconds: float = 3600.0) -> None:
        self.cache = cache
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def sweep_once(self) -> int:
        removed = self.cache.sweep()
        if removed:
            logger.info("Evicted %d expired weather cache entries", removed)
        return removed

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.sweep_once()
            except Exception as exc:
                logger.exception("Weather cache sweep failed: %s", exc)
