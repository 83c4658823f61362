"""
app/domain/cancellation.py

Cooperative cancellation and deadline handling for search runs.
"""

from __future__ import annotations

import threading
import time

from app.errors import SearchCancelledError


class CancellationToken:
    """
    Shared stop signal threaded through every outbound call and pacing wait.
    """

    def __init__(self, *, timeout_seconds: float | None = None) -> None:
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout_seconds if timeout_seconds is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._event.set()
            return True
        return False

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise SearchCancelledError("Search run was cancelled.")

    def sleep(self, seconds: float) -> None:
        """
        Wait up to ``seconds``, returning early and raising once cancelled.
        """

        self.raise_if_cancelled()
        if seconds <= 0:
            return
        wait_seconds = seconds
        if self._deadline is not None:
            wait_seconds = min(wait_seconds, max(0.0, self._deadline - time.monotonic()))
        self._event.wait(wait_seconds)
        self.raise_if_cancelled()


def pause(seconds: float, cancellation: CancellationToken | None = None) -> None:
    """
    Sleep for ``seconds`` through the token when one is supplied.
    """

    if cancellation is not None:
        cancellation.sleep(seconds)
    elif seconds > 0:
        time.sleep(seconds)
