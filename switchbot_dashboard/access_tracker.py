# access_tracker.py
"""Request tracking for outbound SwitchBot API calls.

This module provides the RequestTracker class that tracks:
- Request counts per label per minute, per hour and per day
- Last request timestamp per label
- Total request counts and the remaining daily provider quota

Every attempt that passes the rate gate is recorded, retries included,
because the provider counts each of them against the daily quota.
"""

import logging
import time
from collections import deque
from collections.abc import Callable

from pydantic import BaseModel, Field

from .constants import API_DEFAULTS

_LOGGER = logging.getLogger(__name__)


class RequestStats(BaseModel):
    """Statistics for a single label's outbound requests.

    Attributes:
        request_timestamps: FIFO queue of request timestamps (monotonic time).
        total_count: Total number of requests since creation.
        last_request_time: Timestamp of most recent request.

    Example:
        >>> stats = RequestStats()
        >>> stats.record_request(time.monotonic())
        >>> stats.total_count
        1
    """

    model_config = {"validate_assignment": True, "arbitrary_types_allowed": True}

    # Timestamps of requests in the last day
    request_timestamps: deque[float] = Field(
        default_factory=deque,
        description="FIFO queue of request timestamps (monotonic time)",
    )
    total_count: int = Field(
        default=0,
        ge=0,
        description="Total number of requests since creation",
    )
    last_request_time: float = Field(
        default=0.0,
        ge=0.0,
        description="Timestamp of most recent request",
    )

    def record_request(self, timestamp: float) -> None:
        """Record a new outbound request.

        Args:
            timestamp: Monotonic timestamp of the request.
        """
        self.request_timestamps.append(timestamp)
        self.total_count += 1
        self.last_request_time = timestamp

    def cleanup_old_entries(self, cutoff: float) -> int:
        """Remove entries older than cutoff.

        Args:
            cutoff: Timestamp threshold; entries before this are removed.

        Returns:
            Number of entries removed.
        """
        removed = 0
        while self.request_timestamps and self.request_timestamps[0] < cutoff:
            self.request_timestamps.popleft()
            removed += 1
        return removed

    def count_since(self, cutoff: float) -> int:
        return sum(1 for ts in self.request_timestamps if ts >= cutoff)


class RequestTracker:
    """Tracks outbound request patterns against the provider's daily quota.

    Attributes:
        daily_quota: Requests per day the provider allows.
    """

    # Time windows for statistics
    MINUTE_WINDOW = 60.0  # seconds
    HOUR_WINDOW = 3600.0  # seconds
    DAY_WINDOW = 86400.0  # seconds

    def __init__(
        self,
        daily_quota: int = API_DEFAULTS.DAILY_REQUEST_QUOTA,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the request tracker.

        Args:
            daily_quota: Requests per day the provider allows.
            clock: Monotonic time source.
        """
        self.daily_quota = daily_quota
        self._clock = clock
        self._stats: dict[str, RequestStats] = {}

    def _get_current_time(self) -> float:
        return self._clock()

    def record_request(self, label: str) -> None:
        """Record an outbound request.

        Args:
            label: Name of the call site (e.g. ``GET /devices``).
        """
        current_time = self._get_current_time()
        stats = self._stats.setdefault(label, RequestStats())
        stats.record_request(current_time)
        self._cleanup_old_entries(stats, current_time)

        _LOGGER.debug("Recorded request for %s, total=%d", label, stats.total_count)

        if self.remaining_daily_quota() == 0:
            _LOGGER.warning(
                "Daily SwitchBot request quota of %d reached", self.daily_quota
            )

    def _cleanup_old_entries(self, stats: RequestStats, current_time: float) -> None:
        stats.cleanup_old_entries(current_time - self.DAY_WINDOW)

    def _count_in_window(self, label: str, window: float) -> int:
        if label not in self._stats:
            return 0
        stats = self._stats[label]
        current_time = self._get_current_time()
        self._cleanup_old_entries(stats, current_time)
        return stats.count_since(current_time - window)

    def get_requests_per_minute(self, label: str) -> int:
        """Number of requests in the last minute for a label."""
        return self._count_in_window(label, self.MINUTE_WINDOW)

    def get_requests_per_hour(self, label: str) -> int:
        """Number of requests in the last hour for a label."""
        return self._count_in_window(label, self.HOUR_WINDOW)

    def get_requests_per_day(self, label: str) -> int:
        """Number of requests in the last 24 hours for a label."""
        return self._count_in_window(label, self.DAY_WINDOW)

    def get_total_requests(self, label: str) -> int:
        """Total number of requests for a label since startup."""
        if label not in self._stats:
            return 0
        return self._stats[label].total_count

    def get_all_labels(self) -> list[str]:
        return list(self._stats)

    def get_total_requests_per_day(self) -> int:
        """Requests in the last 24 hours across all labels."""
        return sum(self.get_requests_per_day(label) for label in self._stats)

    def remaining_daily_quota(self) -> int:
        """Requests left in the rolling 24 hour window, never negative."""
        return max(0, self.daily_quota - self.get_total_requests_per_day())

    def get_summary(self) -> dict:
        """Get a summary of all request statistics.

        Returns:
            Dictionary with per-label statistics and the remaining quota.
        """
        summary: dict = {
            label: {
                "per_minute": self.get_requests_per_minute(label),
                "per_hour": self.get_requests_per_hour(label),
                "per_day": self.get_requests_per_day(label),
                "total": self.get_total_requests(label),
            }
            for label in self._stats
        }
        summary["remaining_daily_quota"] = self.remaining_daily_quota()
        return summary
