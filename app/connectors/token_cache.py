"""
Client-credentials bearer token cache.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from app.domain.cancellation import CancellationToken

logger = logging.getLogger(__name__)

TokenFetcher = Callable[[CancellationToken | None], tuple[str, float]]


@dataclass(frozen=True)
class CachedToken:
    """
    Bearer token and the monotonic instant it expires at.
    """

    value: str
    expires_at: float


class ClientCredentialsTokenCache:
    """
    Caches one bearer token and renews it only when expired or near expiry.

    ``fetch_token`` performs the credential exchange and returns the token
    with its lifetime in seconds. It receives the caller's cancellation
    token so a throttled exchange can be abandoned. Refreshes are serialized
    so concurrent callers share a single exchange.
    """

    def __init__(
        self,
        *,
        fetch_token: TokenFetcher,
        buffer_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetch_token = fetch_token
        self._buffer_seconds = max(0.0, buffer_seconds)
        self._clock = clock
        self._cached: CachedToken | None = None
        self._lock = threading.Lock()

    @property
    def cached(self) -> CachedToken | None:
        return self._cached

    def get_access_token(self, cancellation: CancellationToken | None = None) -> str:
        token = self._valid_token()
        if token is not None:
            return token

        with self._lock:
            token = self._valid_token()
            if token is not None:
                return token

            value, expires_in = self._fetch_token(cancellation)
            self._cached = CachedToken(value=value, expires_at=self._clock() + float(expires_in))
            logger.info("Fetched new access token expires_in=%s", expires_in)
            return value

    def invalidate(self) -> None:
        with self._lock:
            self._cached = None

    def _valid_token(self) -> str | None:
        cached = self._cached
        if cached is None:
            return None
        if self._clock() < cached.expires_at - self._buffer_seconds:
            return cached.value
        return None
