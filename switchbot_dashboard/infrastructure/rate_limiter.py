"""Rate limiting for outbound SwitchBot API requests.

This module provides the RateGate class, which enforces a fixed minimum
spacing between the starts of outbound requests. One instance is shared by
every call site of a client; build it once and pass it around explicitly.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from ..access_tracker import RequestTracker
from ..constants import API_DEFAULTS

_LOGGER = logging.getLogger(__name__)

DEFAULT_MIN_REQUEST_INTERVAL = API_DEFAULTS.MIN_REQUEST_INTERVAL


class RateGate:
    """Serializes outbound calls so no two start closer than ``min_interval``.

    Checking the elapsed time, waiting and recording the new timestamp happen
    under one lock. Concurrent acquirers therefore queue up and each one sees
    the timestamp recorded by the acquirer before it.

    Attributes:
        min_interval: Minimum seconds between two acquisitions.
    """

    def __init__(
        self,
        min_interval: float = DEFAULT_MIN_REQUEST_INTERVAL,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        tracker: RequestTracker | None = None,
    ):
        """Initialize the RateGate.

        Args:
            min_interval: Minimum seconds between two acquisitions.
            clock: Monotonic time source.
            sleep: Coroutine used to suspend the caller.
            tracker: Optional tracker that records every acquisition.
        """
        if min_interval < 0:
            raise ValueError("min_interval must not be negative")
        self.min_interval = min_interval
        self.tracker = tracker
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()

        # None until the first acquisition, so the first caller never waits
        self._last_request_time: float | None = None

    @property
    def last_request_time(self) -> float | None:
        return self._last_request_time

    def _get_current_time(self) -> float:
        return self._clock()

    def time_until_ready(self) -> float:
        """Seconds a caller arriving now would have to wait (ignores queued callers)."""
        if self._last_request_time is None:
            return 0.0
        elapsed = self._get_current_time() - self._last_request_time
        return max(0.0, self.min_interval - elapsed)

    async def acquire(self, label: str = "request") -> None:
        """Wait until it is safe to start a request, then claim the slot.

        Args:
            label: Call site name recorded in the tracker.
        """
        async with self._lock:
            wait_time = self.time_until_ready()
            if wait_time > 0:
                _LOGGER.debug(
                    "Rate limiting (%s): waiting %.2fs before request", label, wait_time
                )
                await self._sleep(wait_time)

            self._last_request_time = self._get_current_time()

        if self.tracker is not None:
            self.tracker.record_request(label)
