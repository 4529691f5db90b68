"""
RequestPacer - minimum spacing between outbound API calls.

Per-process only. The upstream API enforces its own rate limits; this
keeps bursts of tool calls from hitting it back-to-back.
"""

import asyncio
import logging
import time
from typing import Optional

from codestral_mcp.config import MIN_REQUEST_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class RequestPacer:
    """
    Guarantees at least `min_interval` seconds between dispatches.

    The read-wait-write sequence runs under an asyncio.Lock, so
    concurrent tool invocations queue up instead of racing past the floor.
    """

    def __init__(self, min_interval: float = MIN_REQUEST_INTERVAL_SECONDS):
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self._min_interval = float(min_interval)
        self._last_dispatch: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def min_interval(self) -> float:
        return self._min_interval

    @property
    def last_dispatch(self) -> Optional[float]:
        """Monotonic timestamp of the last granted slot, or None."""
        return self._last_dispatch

    async def acquire(self) -> None:
        """Wait until a dispatch slot is free, then claim it."""
        async with self._lock:
            if self._last_dispatch is not None:
                wait = self._min_interval - (time.monotonic() - self._last_dispatch)
                if wait > 0:
                    logger.debug(f"Pacing outbound request, waiting {wait * 1000:.1f}ms")
                    await asyncio.sleep(wait)
            # Stamped after the wait so the next caller sees the full interval
            self._last_dispatch = time.monotonic()
