"""Stream clock anchoring the simulated live timeline."""

import asyncio
import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class StreamClock:
    """
    Owns the instant simulated playback began.

    Only the manifest path writes to it (on loop reset), so no locking is
    used. Readers may briefly see a stale anchor; the cost is one slightly
    wrong window.
    """

    def __init__(self, time_source: Callable[[], float] = time.monotonic):
        self._time_source = time_source
        self.stream_start = self.now()
        self.loops = 0

    def now(self) -> float:
        return self._time_source()

    def elapsed(self, now: Optional[float] = None) -> float:
        """Seconds since the stream started, never negative."""
        if now is None:
            now = self.now()
        return max(now - self.stream_start, 0.0)

    def reset(self, now: Optional[float] = None):
        """Re-anchor the stream so it plays again from the beginning."""
        self.stream_start = self.now() if now is None else now
        self.loops += 1
        logger.info(f"Stream clock reset (loop {self.loops})")

    async def sleep(self, seconds: float):
        """Suspend the calling task without blocking other requests."""
        if seconds > 0:
            await asyncio.sleep(seconds)
