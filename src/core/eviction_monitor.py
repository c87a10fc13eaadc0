"""Periodic report of auth timestamp cache evictions.

Evictions mean the cache is smaller than the set of buckets in active use,
so every evicted bucket costs a slow remote read next time it is seen. The
monitor counts evictions and warns once per interval when any occurred.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 600.0


def _describe_interval(seconds: float) -> str:
    if seconds >= 60 and seconds % 60 == 0:
        minutes = int(seconds // 60)
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
    return f"{seconds:g} seconds"


class EvictionMonitor:
    def __init__(
        self,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        knob: str = "AUTH_TIMESTAMP_CACHE_SIZE",
    ) -> None:
        interval = float(interval_seconds)
        if interval <= 0:
            raise ValueError("interval_seconds must be positive")
        self._interval = interval
        self._knob = knob
        self._evictions = 0
        self._task: Optional["asyncio.Task[None]"] = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def pending(self) -> int:
        return self._evictions

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def record_eviction(self, *_: Any) -> None:
        # Signature matches LRUCache's on_evict(key, value)
        self._evictions += 1

    def check(self) -> int:
        """Drain the eviction counter, warning if it was non-zero."""
        count = self._evictions
        if count > 0:
            logger.warning(
                "Auth timestamp cache evicted %d entries in the last %s. Consider increasing '%s'.",
                count,
                _describe_interval(self._interval),
                self._knob,
            )
            self._evictions = 0
        return count

    def start(self) -> None:
        if self.running:
            return
        # Requires a running loop; the task dies with it
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.check()
