"""
app/connectors/base.py

Base marketplace source abstraction and shared HTTP mechanics.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

import requests

from app.config import ExternalHTTPSettings
from app.connectors.rate_limiter import HostRateLimiter
from app.domain.cancellation import CancellationToken, pause
from app.domain.listing import ListingRecord
from app.errors import SearchCancelledError, SourceRequestError, SourceThrottledError

logger = logging.getLogger(__name__)

THROTTLED_STATUS_CODE = 429


class SourceStatus(str, Enum):
    OK = "ok"
    DEGRADED = "degraded"
    EMPTY = "empty"


@dataclass(frozen=True)
class SourceSearchResult:
    """
    Source search outcome: normal records, a degraded fallback, or nothing.
    """

    source: str
    status: SourceStatus
    records: list[ListingRecord] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def ok(cls, source: str, records: list[ListingRecord]) -> SourceSearchResult:
        if not records:
            return cls.empty(source)
        return cls(source=source, status=SourceStatus.OK, records=records)

    @classmethod
    def degraded(
        cls,
        source: str,
        records: list[ListingRecord],
        error: str | None = None,
    ) -> SourceSearchResult:
        return cls(source=source, status=SourceStatus.DEGRADED, records=records, error=error)

    @classmethod
    def empty(cls, source: str, error: str | None = None) -> SourceSearchResult:
        return cls(source=source, status=SourceStatus.EMPTY, records=[], error=error)


class ListingSource(Protocol):
    """
    Anything that turns an artist name into a source search result.
    """

    source: str

    def fetch_listings(
        self,
        artist: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> SourceSearchResult: ...


class BaseMarketplaceSource(ABC):
    """
    Marketplace source interface: artist name in, normalized records out.

    ``fetch_listings`` never raises for upstream or configuration faults;
    only cancellation escapes.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
        rate_limiter: HostRateLimiter | None = None,
        host_class: str | None = None,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._timeout_seconds = http_settings.timeout_seconds
        self._throttle_cooldown_seconds = http_settings.throttle_cooldown_seconds
        self._max_throttle_retries = http_settings.max_throttle_retries
        self._user_agent = http_settings.user_agent
        self._rate_limiter = rate_limiter
        self._host_class = host_class or source

    def fetch_listings(
        self,
        artist: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> SourceSearchResult:
        try:
            return self._search(artist, cancellation=cancellation)
        except SearchCancelledError:
            raise
        except Exception as exc:
            logger.warning(
                "Source search failed source=%s artist=%s error=%s",
                self.source,
                artist,
                exc,
            )
            return self._on_failure(artist, exc)

    def search(self, artist: str) -> list[ListingRecord]:
        return self.fetch_listings(artist).records

    @abstractmethod
    def _search(
        self,
        artist: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> SourceSearchResult:
        """
        Query the upstream and return normalized records for one artist.
        """

    def _on_failure(self, artist: str, exc: Exception) -> SourceSearchResult:
        return SourceSearchResult.empty(self.source, error=str(exc))

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
        auth: tuple[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Any:
        """
        Execute an HTTP request and return parsed JSON.
        """

        response = self._request(
            method=method,
            url=url,
            params=params,
            headers=headers,
            data=data,
            auth=auth,
            cancellation=cancellation,
        )
        try:
            return response.json()
        except ValueError as exc:
            raise SourceRequestError(f"{self.source}: response was not valid JSON.") from exc

    def _request(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
        auth: tuple[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> requests.Response:
        """
        Execute an HTTP request with rate limiting and throttle cooldown.

        A 429 response pauses for the cooldown window and replays the same
        request, up to ``max_throttle_retries`` times.
        """

        request_headers = {"User-Agent": self._user_agent, **(headers or {})}
        for attempt in range(self._max_throttle_retries + 1):
            if cancellation is not None:
                cancellation.raise_if_cancelled()
            if self._rate_limiter is not None:
                self._rate_limiter.throttle(self._host_class, cancellation=cancellation)

            try:
                response = self._session.request(
                    method=method,
                    url=url,
                    params=params,
                    headers=request_headers,
                    data=data,
                    auth=auth,
                    timeout=self._timeout_seconds,
                )
            except requests.RequestException as exc:
                raise SourceRequestError(f"{self.source}: request failed: {exc}") from exc

            if response.status_code != THROTTLED_STATUS_CODE:
                try:
                    response.raise_for_status()
                except requests.HTTPError as exc:
                    logger.error(
                        "Source request failed source=%s status=%s url=%s",
                        self.source,
                        response.status_code,
                        url,
                    )
                    raise SourceRequestError(
                        f"{self.source}: HTTP {response.status_code} from upstream."
                    ) from exc
                return response

            if attempt >= self._max_throttle_retries:
                break

            logger.warning(
                "Rate limited by upstream source=%s attempt=%s/%s wait_seconds=%.1f url=%s",
                self.source,
                attempt + 1,
                self._max_throttle_retries,
                self._throttle_cooldown_seconds,
                url,
            )
            pause(self._throttle_cooldown_seconds, cancellation)

        raise SourceThrottledError(
            f"{self.source}: still throttled after {self._max_throttle_retries} retries."
        )
