"""
Host-class aware request rate limiter.
"""

from __future__ import annotations

import threading
import time

from app.domain.cancellation import CancellationToken, pause


class HostRateLimiter:
    """
    Enforces a minimum interval between request starts per host class.

    Spacing is measured between consecutive starts as seen by this process.
    The lock is held while waiting so concurrent callers queue up rather
    than racing past the check.
    """

    def __init__(self, *, min_interval_seconds: float) -> None:
        self._min_interval_seconds = max(0.0, min_interval_seconds)
        self._last_request_by_host: dict[str, float] = {}
        self._lock = threading.Lock()

    def throttle(
        self,
        host_class: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> None:
        """
        Sleep as needed so requests to ``host_class`` respect the spacing.
        """

        key = host_class.strip().lower()
        if not key or self._min_interval_seconds <= 0:
            return

        with self._lock:
            last_time = self._last_request_by_host.get(key)
            if last_time is not None:
                wait_seconds = self._min_interval_seconds - (time.monotonic() - last_time)
                if wait_seconds > 0:
                    pause(wait_seconds, cancellation)
            self._last_request_by_host[key] = time.monotonic()
